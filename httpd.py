import argparse
import logging
from webworker.config import Config
from webworker.server import ThreadedHTTPServer as Server

def build_parser():
    parser = argparse.ArgumentParser(description="A single-request-per-connection web server")
    parser.add_argument("--host", "-H", type=str, default="0.0.0.0", help="host to listen on")
    parser.add_argument("--port", "-p", type=int, default=8080, help="port to listen on")
    parser.add_argument("--root", "-r", type=str, default=".", help="directory to serve")
    parser.add_argument("--timeout", "-t", type=float, default=None, help="seconds to wait for request data (default: wait forever)")
    parser.add_argument("--first-line-only", action="store_true", help="serve only the first line of each file")
    parser.add_argument("--debug", "-D", action="store_true", help="enable debug logging")
    return parser

def parse_config(argv=None) -> Config:
    args = build_parser().parse_args(argv)
    return Config(
        host=args.host,
        port=args.port,
        root=args.root,
        recv_timeout=args.timeout,
        first_line_only=args.first_line_only,
        debug=args.debug,
    )

def main(argv=None):
    config = parse_config(argv)
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(threadName)s %(levelname)s %(name)s: %(message)s",
    )
    server = Server(config)
    try:
        server.run()
    except KeyboardInterrupt:
        server.stop()

if __name__ == "__main__":
    main()
