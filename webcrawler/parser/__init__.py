"""webcrawler.parser: extraction of page metadata from HTML."""
