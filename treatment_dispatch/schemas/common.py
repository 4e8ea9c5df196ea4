"""Base des schémas d'entrée / Input schema base.

Le client envoie du camelCase (tmcId, truckId...) ; les réponses restent en snake_case.
The client sends camelCase (tmcId, truckId...); responses stay snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeleteResult(BaseModel):
    success: bool = True
    id: int
