"""Command-line tools for editorial_reviews.

- ``python -m editorial_reviews.cli health SOURCE`` -- liveness check
- ``python -m editorial_reviews.cli lookup --artist A --title T`` -- query
  one or more sources and print the combined envelope
- ``python -m editorial_reviews.cli invoke SOURCE < request.json`` -- the
  serialized host contract: JSON input envelope on stdin, output envelope
  on stdout

Log lines always go to stderr so stdout carries only JSON.
"""
