from pydantic import BaseModel, Field


class TreeNode(BaseModel):
    """A virtual directory in a container, or the synthetic root representing the container itself."""

    name: str = Field(description="Last path segment of the directory, or 'root' for the container")
    id: int = Field(gt=0, description="Identifier in depth-first discovery order, the root is always 1")
    url: str = Field(description="Container address followed by the directory prefix")
    children: list["TreeNode"] | None = Field(
        None, description="Child directories, omitted if there are none (the root always has this list)"
    )

    def to_json(self) -> dict:
        """Convert to the json structure the browser expects, leaving out children where there are none"""
        return self.model_dump(exclude_none=True)

    def walk(self):
        """Iterate over this node and all its descendants in depth-first pre-order"""
        yield self
        for child in self.children or []:
            yield from child.walk()


class UploadedFile(BaseModel):
    """For internal use only. A file that was written to a container."""

    key: str
    size: int
