"""
Loading crate models produced by a parser front-end, and writing output.

A model file holds one serialized CrateAnalysis (a JSON object) or a
list of them, one per translation unit.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from archviz.core.analysis import CrateAnalysis, merge_all

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ModelFormatError(ValueError):
    """A model document is not a valid serialized CrateAnalysis."""


def analysis_from_data(data: Any, source: str = "<data>") -> List[CrateAnalysis]:
    """
    Decode one model object or a list of them.

    Raises:
        ModelFormatError: on a missing key, a bad enum value or a wrong type
    """
    documents = data if isinstance(data, list) else [data]
    analyses = []
    for position, document in enumerate(documents):
        if not isinstance(document, dict):
            raise ModelFormatError(
                f"{source}: model #{position} must be a JSON object, "
                f"got {type(document).__name__}"
            )
        try:
            analyses.append(CrateAnalysis.from_dict(document))
        except KeyError as e:
            raise ModelFormatError(f"{source}: model #{position} is missing key {e}")
        except (ValueError, TypeError, AttributeError) as e:
            raise ModelFormatError(f"{source}: model #{position} is malformed: {e}")
    return analyses


def load_models(path: PathLike) -> List[CrateAnalysis]:
    """Read every model stored in a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ModelFormatError(f"{path}: invalid JSON: {e}")
    analyses = analysis_from_data(data, str(path))
    logger.debug("Loaded %d model(s) from %s", len(analyses), path)
    return analyses


def load_and_merge(paths: Sequence[PathLike], name: Optional[str] = None) -> CrateAnalysis:
    """
    Load all model files and merge them into one crate model.

    Later models win on key collisions. The crate name defaults to the
    name of the first model loaded.
    """
    analyses: List[CrateAnalysis] = []
    for path in paths:
        analyses.extend(load_models(path))

    if name is None:
        name = analyses[0].name if analyses else "crate"
    return merge_all(name, analyses)


def write_output(content: str, output: Optional[PathLike] = None) -> None:
    """Write to a file, or to stdout when no path is given."""
    if output is None:
        print(content)
        return
    Path(output).write_text(content, encoding="utf-8")
