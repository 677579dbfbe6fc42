from pydantic import BaseModel


class Violation(BaseModel):
    """A single broken menu rule, addressed by a dotted path of wire names."""

    loc: str
    message: str
    type: str
