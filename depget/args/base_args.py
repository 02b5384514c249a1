from __future__ import annotations

from typing import TypeVar

BaseArgsType = TypeVar("BaseArgsType", bound="BaseArgs")


class BaseArgs:
    configs: dict[str, BaseArgs] = {}

    def __init__(self, **kwargs: str | list[str] | bool):
        self.verbose: bool = bool(kwargs.get("verbose", False))

    @classmethod
    def get(cls: type[BaseArgsType]) -> BaseArgsType:

        if cls.__name__ not in cls.configs:
            cls.configs[cls.__name__] = cls(**DepgetArgs.kwargs)

        return cls.configs[cls.__name__]  # type: ignore

    @classmethod
    def reset(cls):
        cls.configs.clear()


class DepgetArgs:
    kwargs: dict[str, str | bool | list[str]] = {}

    @classmethod
    def init(cls, **kwargs: str | list[str] | bool):
        cls.kwargs = kwargs
        BaseArgs.reset()
