import argparse
import logging

from tinyhttpd.config import Config
from tinyhttpd.server import TinyHTTPServer as Server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="A tiny HTTP/1.0 server for static files and CGI programs")
    parser.add_argument("port", type=int, help="port to listen on")
    parser.add_argument("--host", "-H", type=str, default="0.0.0.0", help="host to listen on")
    parser.add_argument("--root", "-r", type=str, default=".", help="document root")
    parser.add_argument("--cgi-timeout", "-t", type=float, default=30.0, help="seconds a CGI program may run")
    parser.add_argument("--debug", "-D", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = Config(
        host=args.host,
        port=args.port,
        root=args.root,
        cgi_timeout=args.cgi_timeout,
    )
    server = Server(config)
    try:
        server.run()
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutting down")
        server.stop()

if __name__ == "__main__":
    main()
