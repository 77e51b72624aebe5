from pydantic import BaseModel


class ServiceCategory(BaseModel):
    id: str
    name: str
    icon: str
    description: str = ""

    class Config:
        from_attributes = True
