"""Версия дистрибутива uritpl по метаданным установки."""

from importlib import metadata


def tool_version() -> str:
    try:
        return metadata.version("uritpl")
    except metadata.PackageNotFoundError:
        # запуск из исходников без установки
        return "0.0.0"
