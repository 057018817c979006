#!/usr/bin/env python3
"""Serve the generated prime distance report as static files."""
import functools
import http.server
import os
import socketserver

PORT = 8008
DIRECTORY = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "figures", "report")


def make_handler(directory=DIRECTORY):
    return functools.partial(http.server.SimpleHTTPRequestHandler, directory=directory)


def serve(port=PORT, directory=DIRECTORY):
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Report directory not found: {directory} "
                                f"(run 'python tools/prime_cli.py render' first)")
    print(f"Serving Prime Distance report at http://localhost:{port}")
    print("Press Ctrl+C to stop.")

    with socketserver.TCPServer(("", port), make_handler(directory)) as httpd:
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")


if __name__ == "__main__":
    serve()
