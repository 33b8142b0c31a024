"""
https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__
https://docs.sqlalchemy.org/en/20/core/custom_types.html#backend-agnostic-guid-type

uuid_utils.UUID integration for the two boundaries that don't know about it:

- `UtilsUUID7`: pydantic type for FastAPI path params, request and response
  bodies (validated from strings, serialized back to strings, OpenAPI
  `type: string, format: uuid`).
- `UUID7Type`: SQLAlchemy column type. Native `uuid` on PostgreSQL, CHAR(32)
  on SQLite; repositories always get uuid_utils.UUID back instead of the
  stdlib `uuid.UUID` the drivers return.

```python
class SeatHoldResponse(BaseModel):
    id: UtilsUUID7

class SeatHoldModel(Base):
    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)
```
"""

from typing import Any, Optional
import uuid

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from sqlalchemy import Uuid
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator
from uuid_utils import UUID


class UtilsUUID7(UUID):
    """Pydantic-compatible uuid_utils.UUID"""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        JSON mode only accepts strings (JSON has no UUID type); Python mode also
        accepts UUID objects as-is. Serialization is always `str`.

        `json_or_python_schema` is used instead of a plain validator function
        because FastAPI needs a schema it can turn into OpenAPI JSON schema.
        """

        def _to_uuid(value: Any) -> UUID:
            try:
                return UUID(str(value))
            except Exception as e:
                raise ValueError(f'Invalid UUID: {value}') from e

        def validate_uuid_python(value: Any) -> UUID:
            if isinstance(value, UUID):
                return value
            return _to_uuid(value)

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(_to_uuid),
                ]
            ),
            python_schema=core_schema.union_schema(
                [
                    core_schema.is_instance_schema(UUID),
                    core_schema.chain_schema(
                        [
                            core_schema.str_schema(),
                            core_schema.no_info_plain_validator_function(validate_uuid_python),
                        ]
                    ),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                when_used='always',
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # handler(schema) would expand the validator chain into the OpenAPI document
        return {'type': 'string', 'format': 'uuid'}


class UUID7Type(TypeDecorator[UUID]):
    impl = Uuid(as_uuid=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> Optional[uuid.UUID]:
        if value is None:
            return None
        return uuid.UUID(str(value))

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[UUID]:
        if value is None:
            return None
        return UUID(str(value))
