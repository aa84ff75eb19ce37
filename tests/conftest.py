"""
tests/conftest.py
Shared fixtures for the jdlschema test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import pathlib
import textwrap
from typing import Any, Dict

import pytest
import yaml

from jdlschema.models import GeneratorConfig, ParsedSchema
from jdlschema.parser import parse_jdl


# ---------------------------------------------------------------------------
# JDL sources
# ---------------------------------------------------------------------------

BLOG_JDL: str = textwrap.dedent(
    """\
    /*
     * Blog sample application.
     */
    enum Status { DRAFT, PUBLISHED }  // publication state

    @EnableAudit
    entity Blog {
        name String required
        handle String required minlength(2)
    }

    entity Post {
        title String required
        content TextBlob
        status Status
    }

    entity Tag {
        name String required
    }

    // Author lives in another service
    relationship ManyToOne {
        Blog{user(login)} to User
    }

    relationship OneToMany {
        Blog{posts} to Post{blog}
    }

    relationship ManyToMany {
        Post{tags(name)} to Tag{posts}
    }
    """
)

SHOP_JDL: str = textwrap.dedent(
    """\
    enum OrderStatus {
        NEW;
        PAID;
        SHIPPED
    }

    entity Customer {
        firstName String required
        email String
    }

    entity Order {
        placedAt Instant required
        status OrderStatus
    }

    entity Person {
        name String
    }

    relationship OneToMany {
        Customer to Order
    }

    relationship OneToOne {
        Customer{person} to Person
    }
    """
)


# ---------------------------------------------------------------------------
# Parsed fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def blog_jdl() -> str:
    return BLOG_JDL


@pytest.fixture()
def shop_jdl() -> str:
    return SHOP_JDL


@pytest.fixture()
def blog_schema() -> ParsedSchema:
    """The blog sample parsed once per test."""
    return parse_jdl(BLOG_JDL)


@pytest.fixture()
def shop_schema() -> ParsedSchema:
    return parse_jdl(SHOP_JDL)


@pytest.fixture()
def default_config() -> GeneratorConfig:
    return GeneratorConfig()


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def blog_jdl_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the blog sample to a temporary .jdl file and return its path."""
    path = tmp_path / "blog.jdl"
    path.write_text(BLOG_JDL, encoding="utf-8")
    return path


@pytest.fixture()
def config_dict() -> Dict[str, Any]:
    """Config file contents in the nested ``project:`` layout."""
    return {
        "project": {
            "jdlFile": "blog.jdl",
            "pluralOverrides": {"Blog": "weblogs"},
            "relationshipPayloadMode": "fullObject",
        },
        "outputFormat": "yaml",
    }


@pytest.fixture()
def config_yaml_path(config_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the config dict to jdlschema.config.yaml and return its path."""
    path = tmp_path / "jdlschema.config.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(config_dict, fh, default_flow_style=False)
    return path
