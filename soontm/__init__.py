from . import connection, protocol, models, events, client, features

from .client import Error, InternalConsistency, BasicClient
from .protocol import ProtocolViolation
from .features.rfc1459.protocol import ServerError, InsecureCredentialTransmission, NicknameUnavailable
from .features.ircv3.cap import CapabilityNegotiationFailed, NEGOTIATING as CAPABILITY_NEGOTIATING, \
    FAILED as CAPABILITY_FAILED, NEGOTIATED as CAPABILITY_NEGOTIATED

__name__ = 'soontm'
__version__ = '0.3.0'
__version_info__ = (0, 3, 0)
__license__ = 'BSD'


def featurize(*features):
    """ Put features into proper MRO order. """
    from functools import cmp_to_key

    def compare_subclass(left, right):
        if issubclass(left, right):
            return -1
        elif issubclass(right, left):
            return 1
        return 0

    sorted_features = sorted(features, key=cmp_to_key(compare_subclass))
    name = 'FeaturizedClient[{features}]'.format(
        features=', '.join(feature.__name__ for feature in sorted_features))
    return type(name, tuple(sorted_features), {})


def parse(line, encoding=protocol.DEFAULT_ENCODING):
    """ Parse a single IRC line, message tags included. Never raises: check the result's _valid for sanity. """
    return features.ircv3.TaggedMessage.parse(line, encoding=encoding)


class Client(featurize(*features.ALL)):
    """ A fully featured IRC client. """
    pass


class MinimalClient(featurize(*features.LITE)):
    """ A cut-down, less-featured IRC client: capability negotiation and SASL, but no other IRCv3 extensions. """
    pass
