from __future__ import annotations

from pydantic import BaseModel


class Credentials(BaseModel):
    """Form body shared by sign-up and log-in.

    Both fields must be present; emptiness is left to the HTML form.
    """

    username: str
    password: str

    model_config = {
        "json_schema_extra": {
            "example": {"username": "ada", "password": "correct horse battery staple"}
        },
    }
