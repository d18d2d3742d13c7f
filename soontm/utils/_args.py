## _args.py
# Common argument parsing code.
import argparse
import functools
import logging
import soontm

def client_from_args(name, description, default_nick='soontm', cls=soontm.Client):
    # Parse some arguments.
    parser = argparse.ArgumentParser(name, description=description, add_help=False,
        epilog='This program is part of {package}.'.format(package=soontm.__name__))

    meta = parser.add_argument_group('Meta')
    meta.add_argument('-h', '--help', action='help', help='What you are reading right now.')
    meta.add_argument('-v', '--version', action='version', version='{package}/%(prog)s {ver}'.format(package=soontm.__name__, ver=soontm.__version__), help='Dump version number.')
    meta.add_argument('-V', '--verbose', help='Be verbose in warnings and errors.', action='store_true', default=False)
    meta.add_argument('-d', '--debug', help='Show debug output, including every line sent and received.', action='store_true', default=False)

    conn = parser.add_argument_group('Connection')
    conn.add_argument('server', help='The server to connect to.', metavar='SERVER')
    conn.add_argument('-p', '--port', help='The port to use. (default: 6667, 6697 (TLS))', type=int)
    conn.add_argument('-P', '--password', help='Server password. Doubles as SASL password.', metavar='PASS')
    conn.add_argument('--tls', help='Use TLS. (default: no)', action='store_true', default=False)
    conn.add_argument('--verify-tls', help='Verify TLS certificate sent by server. (default: no)', action='store_true', default=False)
    conn.add_argument('--sloppy', help='Only warn when credentials go out over an unencrypted connection. (default: no)', action='store_true', default=False)
    conn.add_argument('-e', '--encoding', help='Connection encoding. (default: UTF-8)', default='utf-8', metavar='ENCODING')

    init = parser.add_argument_group('Initialization')
    init.add_argument('-n', '--nickname', help='Nickname. (default: {})'.format(default_nick), default=default_nick, metavar='NICK')
    init.add_argument('-u', '--username', help='Username. (default: derived from nickname)', metavar='USER')
    init.add_argument('-r', '--realname', help='Realname (GECOS). (default: derived from nickname)', metavar='REAL')
    init.add_argument('-c', '--channel', help='Channel to automatically join. Can be set multiple times for multiple channels.', action='append', dest='channels', default=[], metavar='CHANNEL')
    init.add_argument('--ctcp-version', help='Answer to CTCP VERSION. (default: {package} v{ver})'.format(package=soontm.__name__, ver=soontm.__version__), metavar='VERSION')
    init.add_argument('--no-names', help='Do not collect NAMES replies.', action='store_false', dest='names', default=True)

    auth = parser.add_argument_group('Authentication')
    auth.add_argument('--sasl', help='Authenticate using SASL PLAIN. (default: no)', action='store_true', default=False)
    auth.add_argument('--sasl-identity', help='Identity to use for SASL authentication. (default: SASL username)', metavar='SASLIDENT')
    auth.add_argument('--sasl-username', help='Username to use for SASL authentication. (default: username)', metavar='SASLUSER')
    auth.add_argument('--sasl-password', help='Password to use for SASL authentication. (default: server password)', metavar='SASLPASS')
    auth.add_argument('--tls-client-cert', help='TLS client certificate to use.', metavar='CERT')
    auth.add_argument('--tls-client-cert-keyfile', help='Keyfile to use for TLS client cert.', metavar='KEYFILE')

    args = parser.parse_args()

    # Set log level.
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(level=log_level)

    # Setup client and connect.
    client = cls(nickname=args.nickname, username=args.username, realname=args.realname,
        sloppy=args.sloppy, names=args.names, version=args.ctcp_version,
        sasl=args.sasl, sasl_identity=args.sasl_identity, sasl_username=args.sasl_username, sasl_password=args.sasl_password,
        tls_client_cert=args.tls_client_cert, tls_client_cert_key=args.tls_client_cert_keyfile)

    connect = functools.partial(client.connect,
        hostname=args.server, port=args.port, password=args.password, encoding=args.encoding,
        channels=args.channels, tls=args.tls, tls_verify=args.verify_tls
    )

    return client, connect
