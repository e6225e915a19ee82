"""Git refs, file contents and commits."""

import base64
from datetime import datetime

from pydantic import BaseModel


class Ref(BaseModel):
    """A git reference and the commit it points at."""

    ref: str
    sha: str


class FileContent(BaseModel):
    """Result of a contents lookup; content is base64 when encoding is base64."""

    path: str
    type: str = "file"
    sha: str = ""
    content: str | None = None
    encoding: str | None = None

    def decoded(self) -> str:
        if not self.content:
            return ""
        if self.encoding == "base64":
            return base64.b64decode(self.content).decode("utf-8")
        return self.content


class Commit(BaseModel):
    sha: str
    committed_at: datetime
