"""Review lookup services: matching, structured extraction, index crawling, dispatch."""
