import logging
from collections.abc import Mapping

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse

from gendoc.config import PluginConfig, load_config
from gendoc.core.comments import collect_comments
from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import ConfigError, ResolutionError
from gendoc.core.request import build_response, error_response
from gendoc.doctree import create_tree

logger = logging.getLogger(__name__)


def generate_documentation(
    request: CodeGeneratorRequest,
    config: PluginConfig,
    diagnostics: Diagnostics | None = None,
) -> CodeGeneratorResponse:
    """Attach the request's comments to a documentation tree and render it.

    Resolution errors other than stale coordinates propagate to the caller.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    diagnostics.info(0, "Processing the CodeGeneratorRequest")

    tree = create_tree(request, config.format)
    collect_comments(request.file_to_generate, request.proto_file, tree, diagnostics)

    files = [(config.output, tree.render())]
    if config.diagnostics:
        files.append((config.diagnostics, diagnostics.render()))
    return build_response(files)


def run_plugin(
    request: CodeGeneratorRequest,
    config: PluginConfig | None = None,
    environ: Mapping[str, str] | None = None,
) -> CodeGeneratorResponse:
    """Produce the plugin response, reporting fatal errors through ``response.error``."""
    try:
        if config is None:
            config = load_config(request.parameter, environ)
        return generate_documentation(request, config)
    except ConfigError as exc:
        logger.error("Invalid plugin configuration: %s", exc)
        return error_response(str(exc))
    except ResolutionError as exc:
        logger.error("Cannot associate comments in %s: %s", exc.location, exc)
        return error_response(f"gendoc: {exc} ({exc.location})")
