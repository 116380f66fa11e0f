"""Test fixtures for gren-compiler-library tests.

Fixtures are organized by type:

- compilers: Compiler configurations rooted in a temporary cache and fake
  `gren` executables written as small shell scripts

Import fixtures in your tests using:
    from tests.fixtures.compilers import compiler_config, fake_compiler
"""

__all__ = [
    "compilers",
]
