# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authcore.shared.config.settings import DatabaseConfig
from authcore.shared.logging import logger


class Base(DeclarativeBase):
    pass


def build_engine(config: DatabaseConfig) -> Engine:
    url = config.url
    kwargs: dict[str, object] = {
        "echo": config.echo,
        "future": True,
        "pool_pre_ping": True,
    }
    if url.startswith("sqlite"):
        connect_args: dict[str, object] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        kwargs["connect_args"] = connect_args
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database.
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    engine = create_engine(url, **kwargs)
    logger.debug(f"db.engine: created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_session_factory(engine: Engine) -> Callable[[], Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    from authcore.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
