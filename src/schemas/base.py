from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """API 응답 공통 스키마 (camelCase 직렬화)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
