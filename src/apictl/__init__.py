"""Declarative HTTP API runner.

The `apictl` package runs HTTP requests and tests described in YAML
documents.

Key features:
- named contexts of variables merged for a run;
- `${...}` templates resolved against contexts and earlier responses;
- raw, form and multipart request bodies;
- assertions on status codes, headers and JSON body fields;
- a command-line interface and a pytest plugin reporting the results.

Requests of a run are always issued strictly in sequence, and every run
records its responses in its own store.
"""

__version__ = '0.1.0'
