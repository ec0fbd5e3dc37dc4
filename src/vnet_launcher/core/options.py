"""Invocation options for a single launcher run."""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class InvocationOptions:
    """Options parsed from one ``run_net`` command line."""

    node_path: str
    config_dir: str
    extra_args: tuple[str, ...] = ()
    clean: bool = False
    debug: bool = False

    @classmethod
    def from_positionals(
        cls, positionals: Sequence[str], clean: bool = False, debug: bool = False
    ) -> "InvocationOptions":
        """Build options from the positional tokens left after flag extraction.

        Raises:
            ValueError: If fewer than two positionals are given
        """
        if len(positionals) < 2:
            raise ValueError("a node binary and a configuration directory are required")

        node_path, config_dir, *extra_args = positionals
        return cls(
            node_path=node_path,
            config_dir=config_dir,
            extra_args=tuple(extra_args),
            clean=clean,
            debug=debug,
        )
