from pydantic import BaseModel
from typing import Dict, Optional, Union
from uuid import UUID
from datetime import datetime

# bool first, so JSON true/false are not coerced to 1/0
SettingValue = Union[bool, int, float, str]


class SystemSettingRead(BaseModel):
    setting_key: str
    setting_value: Optional[SettingValue] = None
    description: Optional[str] = None
    updated_by: Optional[UUID] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class SettingUpdate(BaseModel):
    value: SettingValue
    description: Optional[str] = None


class SettingsBulkUpdate(BaseModel):
    settings: Dict[str, SettingValue]
