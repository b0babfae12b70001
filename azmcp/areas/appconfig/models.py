"""App Configuration result models."""

from datetime import datetime
from typing import Dict, Optional

from ...response import ResultModel


class AppConfigurationAccount(ResultModel):
    name: str
    id: Optional[str] = None
    location: Optional[str] = None
    endpoint: Optional[str] = None
    creation_date: Optional[datetime] = None
    provisioning_state: Optional[str] = None
    sku: Optional[str] = None
    public_network_access: Optional[str] = None
    disable_local_auth: Optional[bool] = None
    tags: Optional[Dict[str, str]] = None


class KeyValueSetting(ResultModel):
    key: str
    value: Optional[str] = None
    label: Optional[str] = None
    content_type: Optional[str] = None
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None
    locked: bool = False
    tags: Optional[Dict[str, str]] = None
