## tags.py
# Tagged message support.
import re

import soontm.protocol
from soontm.features import rfc1459

__all__ = [ 'TaggedMessage', 'TaggedMessageSupport' ]


TAG_INDICATOR = '@'
TAG_SEPARATOR = ';'
TAG_VALUE_SEPARATOR = '='
TAGGED_MESSAGE_LENGTH_LIMIT = 8191 + rfc1459.protocol.MESSAGE_LENGTH_LIMIT

TAG_CONVERSIONS = {
    r"\:": ';',
    r"\s": ' ',
    r"\\": '\\',
    r"\r": '\r',
    r"\n": '\n'
}
TAG_ESCAPE_PATTERN = re.compile(r"\\(:|s|\\|r|n|.)?")


class TaggedMessage(rfc1459.RFC1459Message):
    """ An IRC message with IRCv3 message tags. Tags without a value map to an empty string. """

    @classmethod
    def parse(cls, line, encoding=soontm.protocol.DEFAULT_ENCODING):
        """
        Parse given line into IRC message structure.
        Returns a TaggedMessage.
        """
        valid = True
        # Decode message.
        if isinstance(line, bytes):
            try:
                message = line.decode(encoding)
            except UnicodeDecodeError:
                # Try our fallback encoding.
                message = line.decode(soontm.protocol.FALLBACK_ENCODING)
        else:
            message = line

        # Sanity check for message length.
        if len(message) > TAGGED_MESSAGE_LENGTH_LIMIT:
            valid = False

        # Strip message separator.
        if message.endswith(rfc1459.protocol.LINE_SEPARATOR):
            message = message[:-len(rfc1459.protocol.LINE_SEPARATOR)]
        elif message.endswith(rfc1459.protocol.MINIMAL_LINE_SEPARATOR):
            message = message[:-len(rfc1459.protocol.MINIMAL_LINE_SEPARATOR)]
        raw = message

        # Parse tags.
        tags = {}
        if message.startswith(TAG_INDICATOR):
            message = message[len(TAG_INDICATOR):]
            raw_tags, _, message = message.partition(' ')

            for raw_tag in raw_tags.split(TAG_SEPARATOR):
                if not raw_tag:
                    continue
                tag, _, value = raw_tag.partition(TAG_VALUE_SEPARATOR)
                # Finally: add constructed tag to the output object.
                tags[tag] = unescape_tag_value(value)

        # Parse rest of message.
        message = super().parse(message.lstrip(' '), encoding=encoding)
        kw = dict(message._kw, tags=tags)
        return cls(_raw=raw, _valid=message._valid and valid, **kw)

    def construct(self, force=False):
        """
        Construct raw IRC message and return it.
        """
        message = super().construct(force=force)

        # Add tags.
        if self.tags:
            raw_tags = []
            for tag, value in self.tags.items():
                if value is True or not value:
                    raw_tags.append(tag)
                else:
                    raw_tags.append(tag + TAG_VALUE_SEPARATOR + escape_tag_value(value))

            message = TAG_INDICATOR + TAG_SEPARATOR.join(raw_tags) + ' ' + message

        if len(message) > TAGGED_MESSAGE_LENGTH_LIMIT and not force:
            raise soontm.protocol.ProtocolViolation(
                'The constructed message is too long. ({len} > {maxlen})'.format(len=len(message),
                                                                                 maxlen=TAGGED_MESSAGE_LENGTH_LIMIT),
                message=message)
        return message


class TaggedMessageSupport(rfc1459.RFC1459Support):
    def _create_message(self, command, *params, tags=None, **kwargs):
        return TaggedMessage(command, params, tags=tags, **kwargs)

    def _parse_message(self):
        sep = rfc1459.protocol.MINIMAL_LINE_SEPARATOR.encode(self.encoding)
        message, _, data = self._receive_buffer.partition(sep)
        self._receive_buffer = data

        return TaggedMessage.parse(message + sep, encoding=self.encoding)


## Helpers.

def unescape_tag_value(value):
    """ Undo IRCv3 tag value escaping. Unknown escapes drop the backslash, a trailing backslash is dropped. """
    def replace(match):
        escape = match.group(0)
        if escape in TAG_CONVERSIONS:
            return TAG_CONVERSIONS[escape]
        return escape[1:]
    return TAG_ESCAPE_PATTERN.sub(replace, value)

def escape_tag_value(value):
    """ Apply IRCv3 tag value escaping. """
    value = value.replace('\\', r"\\")
    for escape, replacement in TAG_CONVERSIONS.items():
        if replacement != '\\':
            value = value.replace(replacement, escape)
    return value
