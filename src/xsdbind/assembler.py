import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .config import GeneratorConfig
from .declarations import Declaration
from .engine import CodeGenerator, GeneratorContext
from .errors import ArtifactWriteError
from .proto import ProtoTree
from .targets import Target, get_target

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    path: Path
    source: str
    declarations: List[Declaration]


def assemble(generator: CodeGenerator, package: str, header: Optional[str] = None) -> str:
    """Preamble followed by every emitted declaration in traversal order."""
    context = generator.context
    body = "".join(context.bodies())
    preamble = generator.target.render_preamble(package, frozenset(context.flags), header)
    return preamble + body


def artifact_path(base_path: Union[str, Path], target: Target) -> Path:
    base = str(base_path)
    if base.endswith(target.suffix):
        return Path(base)
    return Path(base + target.suffix)


def write_artifact(source: str, base_path: Union[str, Path], target: Target) -> Path:
    path = artifact_path(base_path, target)
    try:
        out_dir = os.path.dirname(path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
    except OSError as e:
        raise ArtifactWriteError(path, e) from e
    logger.info(f"Successfully generated {target.name} source at {path}")
    return path


def generate(tree: ProtoTree, config: GeneratorConfig) -> GenerationResult:
    """Run the whole pipeline for one proto tree and write one artifact."""
    target = get_target(config.language)
    generator = CodeGenerator(tree, target, GeneratorContext(strict=config.strict))
    declarations = generator.run()
    source = assemble(generator, config.package, config.header)
    path = write_artifact(source, config.output, target)
    return GenerationResult(path=path, source=source, declarations=declarations)
