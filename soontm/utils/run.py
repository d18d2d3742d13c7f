## run.py
# Run client, logging every event.
import asyncio
import logging

import soontm
from . import _args


class EventLogger(soontm.Client):
    """ Client that logs every event it sees. """

    async def on_event(self, event):
        fields = ', '.join('{}={!r}'.format(name, value) for name, value in zip(event._fields, event) if name != 'line')
        logging.getLogger('soontm.events').info('%s: %s', event.kind, fields)


async def run(client, connect):
    await connect()
    await client.handle_forever()


def main():
    logging.getLogger('soontm.events').setLevel(logging.INFO)
    client, connect = _args.client_from_args('soontm', description='soontm IRC protocol engine.', cls=EventLogger)
    asyncio.run(run(client, connect))


if __name__ == '__main__':
    main()
