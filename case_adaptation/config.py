"""
Predictor configuration.

Option flags follow the usual lazy-learner conventions:

    -K <k>       number of base cases (default 1)
    -L <l>       adaptations applied per base case (default 1)
    -O <o>       rule generation neighborhood scale factor (default 1)
    -W <size>    maximum number of cases kept, FIFO (default 0 = no window)
    -A <method>  case search method: brute, kd_tree, ball_tree (default brute)
    -B <method>  rule search method: brute, kd_tree, ball_tree (default brute)
    -N           normalize features by their range before measuring distance
"""

import argparse
import numbers
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import ConfigurationError
from .indexing import INDEX_METHODS


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting."""

    def error(self, message):
        raise ConfigurationError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _OptionParser(prog='case-adaptation', add_help=False)
    parser.add_argument('-K', dest='k', type=int, default=1)
    parser.add_argument('-L', dest='l', type=int, default=1)
    parser.add_argument('-O', dest='o', type=float, default=1.0)
    parser.add_argument('-W', dest='window_size', type=int, default=0)
    parser.add_argument('-A', dest='case_search', default='brute')
    parser.add_argument('-B', dest='rule_search', default='brute')
    parser.add_argument('-N', dest='normalize', action='store_true')
    return parser


class AdaptationConfig:
    """
    Settings for one predictor.

    Args:
        k: Number of base cases averaged into a prediction (>= 1)
        l: Adaptation rules applied per base case (>= 0, 0 disables adaptation)
        o: Scale factor for the rule generation neighborhood (>= 1)
        window_size: Maximum number of cases kept (0 = unbounded)
        case_search: Index method for case retrieval
        rule_search: Index method for rule retrieval
        leaf_size: Leaf size passed to tree indices
        normalize: Rescale features to [0, 1] by their range before distances are measured
    """

    def __init__(
        self,
        k: int = 1,
        l: int = 1,
        o: float = 1.0,
        window_size: int = 0,
        case_search: str = 'brute',
        rule_search: str = 'brute',
        leaf_size: int = 30,
        normalize: bool = False
    ):
        self.k = k
        self.l = l
        self.o = o
        self.window_size = window_size
        self.case_search = case_search
        self.rule_search = rule_search
        self.leaf_size = leaf_size
        self.normalize = normalize
        self.validate()

    @staticmethod
    def _is_integer(value) -> bool:
        return isinstance(value, numbers.Integral) and not isinstance(value, bool)

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range settings."""
        if not self._is_integer(self.k) or self.k < 1:
            raise ConfigurationError(f"k must be an integer >= 1 (got {self.k!r})")
        if not self._is_integer(self.l) or self.l < 0:
            raise ConfigurationError(f"l must be an integer >= 0 (got {self.l!r})")
        if isinstance(self.o, bool) or not isinstance(self.o, numbers.Real) or not self.o >= 1:
            raise ConfigurationError(f"o must be a number >= 1 (got {self.o!r})")
        if not self._is_integer(self.window_size) or self.window_size < 0:
            raise ConfigurationError(f"window_size must be an integer >= 0 (got {self.window_size!r})")
        for name in ('case_search', 'rule_search'):
            method = getattr(self, name)
            if method not in INDEX_METHODS:
                raise ConfigurationError(f"Unknown index method for {name}: {method!r}. "
                                         f"Use one of {', '.join(INDEX_METHODS)}.")
        if self.leaf_size < 1:
            raise ConfigurationError(f"leaf_size must be >= 1 (got {self.leaf_size})")
        if not isinstance(self.normalize, bool):
            raise ConfigurationError(f"normalize must be True or False (got {self.normalize!r})")

    def index_kwargs(self, method: str) -> Dict[str, Any]:
        """Keyword arguments for ``create_index`` given a method name."""
        return {} if method == 'brute' else {'leaf_size': self.leaf_size}

    @classmethod
    def from_options(cls, options: Optional[Sequence[str]] = None) -> "AdaptationConfig":
        """Parse ``-K -L -O -W -A -B -N`` flags. Missing flags take their defaults."""
        args = _build_parser().parse_args(list(options or []))
        return cls(
            k=args.k,
            l=args.l,
            o=args.o,
            window_size=args.window_size,
            case_search=args.case_search,
            rule_search=args.rule_search,
            normalize=args.normalize,
        )

    def to_options(self) -> List[str]:
        options = [
            '-K', str(self.k),
            '-L', str(self.l),
            '-O', str(float(self.o)),
            '-W', str(self.window_size),
            '-A', self.case_search,
            '-B', self.rule_search,
        ]
        if self.normalize:
            options.append('-N')
        return options

    def to_dict(self) -> Dict[str, Any]:
        return {
            "k": self.k,
            "l": self.l,
            "o": self.o,
            "window_size": self.window_size,
            "case_search": self.case_search,
            "rule_search": self.rule_search,
            "leaf_size": self.leaf_size,
            "normalize": self.normalize,
        }

    def __repr__(self) -> str:
        return (f"AdaptationConfig(k={self.k}, l={self.l}, o={self.o}, "
                f"window_size={self.window_size}, case_search='{self.case_search}', "
                f"rule_search='{self.rule_search}', normalize={self.normalize})")
