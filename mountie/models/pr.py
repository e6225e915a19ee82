"""Pull request model."""

from typing import Literal

from pydantic import BaseModel

PullState = Literal["open", "closed", "all"]


class PR(BaseModel):
    """Pull request."""

    number: int
    title: str
    body: str = ""
    head_branch: str
    base_branch: str
    state: str
    html_url: str | None = None
