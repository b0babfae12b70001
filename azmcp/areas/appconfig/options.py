"""App Configuration option definitions and bound option models."""

from typing import List, Optional

from ...commands.base import SubscriptionOptions
from ...options import Option, OptionKind


class AppConfigOptionDefinitions:
    ACCOUNT = Option("account", "The name of the App Configuration store (e.g., my-appconfig).", required=True)
    KEY = Option("key", "The name of the key to access within the App Configuration store.", required=True)
    VALUE = Option("value", "The value to set for the configuration key.", required=True)
    LABEL = Option(
        "label",
        "The label to apply to the configuration key. Labels are used to group and organize settings.",
    )
    CONTENT_TYPE = Option(
        "content-type",
        "The content type of the configuration value. This is used to indicate how the value should be "
        "interpreted or parsed.",
    )
    TAGS = Option(
        "tags",
        "The tags to associate with the configuration key. Tags should be in the format 'key=value'. "
        "Multiple tags can be specified.",
        kind=OptionKind.STRING_ARRAY,
        allow_multiple_per_token=True,
    )
    LOCK = Option(
        "lock",
        "Whether a key-value will be locked (set to read-only) or unlocked (read-only removed).",
        kind=OptionKind.BOOL,
    )
    KEY_FILTER = Option(
        "key",
        "Specifies the key filter, if any, to be used when retrieving key-values. The filter can be an exact "
        "match, for example a filter of 'foo' would get all key-values with a key of 'foo', or the filter can "
        "include a '*' character at the end of the string for wildcard searches.",
    )
    LABEL_FILTER = Option(
        "label",
        "Specifies the label filter, if any, to be used when retrieving key-values. The filter can be an exact "
        "match, for example a filter of 'foo' would get all key-values with a label of 'foo', or the filter can "
        "include a '*' character at the end of the string for wildcard searches.",
    )


class AccountOptions(SubscriptionOptions):
    account: Optional[str] = None


class KeyValueOptions(AccountOptions):
    key: Optional[str] = None
    label: Optional[str] = None


class KeyValueSetOptions(KeyValueOptions):
    value: Optional[str] = None
    content_type: Optional[str] = None
    tags: Optional[List[str]] = None


class KeyValueLockSetOptions(KeyValueOptions):
    lock: bool = False
