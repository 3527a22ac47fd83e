from dataclasses import dataclass


class BirdNotFound(LookupError):
    def __init__(self, bird_id):
        super().__init__(f"Bird {bird_id} not found")
        self.bird_id = bird_id


class BirdValidationError(ValueError):
    pass


@dataclass(frozen=True)
class Bird:
    id: int
    name: str
    image_url: str | None = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "imageUrl": self.image_url}

    @classmethod
    def from_dict(cls, data: dict) -> "Bird":
        bird_id = data["id"]
        if isinstance(bird_id, bool) or not isinstance(bird_id, int):
            raise ValueError(f"invalid bird id: {bird_id!r}")
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError(f"invalid bird name: {name!r}")
        return cls(id=bird_id, name=name, image_url=data.get("imageUrl") or None)
