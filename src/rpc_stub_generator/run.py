"""Top-level module for client generation."""

from __future__ import annotations

import argparse
import logging
import os.path
import subprocess

from rpc_stub_generator.bindings import BindingCatalog, get_bindings
from rpc_stub_generator.conventions import (
    get_common_rpc_fns,
    get_handler_names_manual,
    get_handlers_from_route_builder,
    get_route_builder_fns,
)
from rpc_stub_generator.directories import (
    BINDINGS_FILE_NAME,
    EXCLUDED_DIRECTORY,
    HANDLER_SUFFIX,
    RPC_MARKER,
    Directory,
    FileClassifier,
)
from rpc_stub_generator.signature import get_handler_params, has_signature
from rpc_stub_generator.writer import Writer
from rpc_stub_generator.writer_dto import HandlerDescriptor

logger = logging.getLogger(__name__)

OUTPUT_FILE_NAME = "generated_client.ts"
TYPESHARE_LANGUAGE = "typescript"


class TypeshareError(Exception):
    """Raised when typeshare fails to generate the bindings."""

    pass


class SourceReadError(Exception):
    """Raised when a source file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot read '{path}': {reason}")


def run_typeshare(root_directory: str, bindings_path: str) -> None:
    """Generate the TypeScript bindings of all typeshare annotated Rust types.

    Args:
        root_directory: The Rust workspace to scan.
        bindings_path: The bindings file to write.

    Raises:
        TypeshareError: If typeshare is missing or exits with an error.
    """
    logger.info("Running typeshare!")

    try:
        result = subprocess.run(
            ["typeshare", "--lang", TYPESHARE_LANGUAGE, "--output-file", bindings_path, root_directory],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        logger.error("typeshare not found. Please install typeshare: cargo install typeshare-cli")
        raise TypeshareError("typeshare command not found. Please install typeshare.")
    except subprocess.SubprocessError as e:
        error_msg = f"Error running typeshare: {e}"
        logger.error(error_msg)
        raise TypeshareError(error_msg)

    if result.returncode != 0:
        error_msg = f"typeshare exited with code {result.returncode}:\n\n{result.stderr}"
        logger.error(error_msg)
        raise TypeshareError(error_msg)


def read_source(path: str) -> str:
    """Read a source file as UTF-8 text.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf8") as source_file:
            return source_file.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e)) from e


def build_binding_catalog(directory: Directory, classifier: FileClassifier) -> BindingCatalog:
    """Collect the names declared in every bindings file of the tree.

    Args:
        directory: The directory tree to scan.
        classifier: Decides which files are bindings files.

    Returns:
        BindingCatalog: The complete catalog.
    """
    names: list[str] = []
    for path in directory.walk_files():
        if classifier.is_bindings_file(path):
            file_bindings = get_bindings(read_source(path))
            logger.debug(f"Found {len(file_bindings)} binding(s) in '{path}'")
            names.extend(file_bindings)

    catalog = BindingCatalog.from_names(names)
    logger.info(f"Collected {len(catalog)} binding(s).")
    return catalog


def process_rpc_file(path: str, entity_tag: str, depth_aware: bool = False) -> list[HandlerDescriptor]:
    """Extract the descriptors of all handlers defined in one handler file.

    Hand-written handlers (registered with `.into_dyn()` or listed by `router_builder!`) are
    resolved from their signature, the remaining routes from `generate_common_rpc_fns!`.

    Args:
        path: The handler file.
        entity_tag: The entity all handlers of this file are grouped under.
        depth_aware: Whether parameter lists are split with bracket tracking.

    Returns:
        list[HandlerDescriptor]: The descriptors, explicit handlers first.
    """
    content = read_source(path)

    routes = get_route_builder_fns(content)
    handler_names = list(dict.fromkeys(get_handler_names_manual(content) + routes))
    explicit_names = [name for name in handler_names if has_signature(content, name)]
    declarative_names = [name for name in routes if name not in explicit_names]

    descriptors = [
        HandlerDescriptor.from_handler_params(name, entity_tag, get_handler_params(content, name, depth_aware))
        for name in explicit_names
    ]
    descriptors.extend(
        HandlerDescriptor.from_handler_params(name, entity_tag, handler_params)
        for name, handler_params in get_handlers_from_route_builder(
            path, declarative_names, get_common_rpc_fns(content)
        )
    )

    return [descriptor for descriptor in descriptors if descriptor.is_renderable]


def collect_handlers(
    directory: Directory, classifier: FileClassifier, depth_aware: bool = False
) -> list[HandlerDescriptor]:
    """Extract the handler descriptors of every handler file in the tree, in traversal order.

    Args:
        directory: The directory tree to scan.
        classifier: Decides which files are handler files.
        depth_aware: Whether parameter lists are split with bracket tracking.

    Returns:
        list[HandlerDescriptor]: All renderable handler descriptors.
    """
    descriptors: list[HandlerDescriptor] = []
    tag_paths: dict[str, str] = {}
    for path in directory.walk_files():
        if classifier.is_rpc_file(path):
            entity_tag = classifier.entity_tag(path)
            if entity_tag in tag_paths:
                logger.warning(
                    f"Handler files '{tag_paths[entity_tag]}' and '{path}' share the client name '{entity_tag}', "
                    "their handlers are merged into one client."
                )
            tag_paths.setdefault(entity_tag, path)

            file_descriptors = process_rpc_file(path, entity_tag, depth_aware)
            logger.info(f"Found {len(file_descriptors)} handler(s) in '{path}'.")
            descriptors.extend(file_descriptors)

    return descriptors


def generate_client(
    directory: Directory,
    classifier: FileClassifier,
    types_dir: str,
    strict_bindings: bool = False,
    depth_aware: bool = False,
) -> str:
    """Entry-point for generating the client text of a directory tree.

    The binding catalog is complete before the first handler file is read.

    Args:
        directory: The directory tree to scan.
        classifier: Decides which files are bindings and handler files.
        types_dir: Directory of the bindings, used in the import statements.
        strict_bindings: Skip handlers whose types are missing from the bindings.
        depth_aware: Whether parameter lists are split with bracket tracking.

    Returns:
        str: The generated client file content.
    """
    catalog = build_binding_catalog(directory, classifier)
    descriptors = collect_handlers(directory, classifier, depth_aware)

    writer = Writer(catalog, types_dir, strict_bindings=strict_bindings)
    for descriptor in descriptors:
        writer.add_handler(descriptor)

    logger.debug(repr(writer.clients))
    return writer.dumps()


def write_client(content: str, client_dir: str, output_name: str = OUTPUT_FILE_NAME) -> str:
    """Write the generated client.

    Returns:
        str: The path of the written file.
    """
    output_path = os.path.join(client_dir, output_name)
    with open(output_path, "w", encoding="utf8") as output_file:
        output_file.write(content)

    return output_path


def run(args: argparse.Namespace, root_directory: str):
    """Run the client generator on a Rust workspace.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the generator.
        root_directory (str): The directory, from which the generator is executed.
    """
    root: str = os.path.join(root_directory, getattr(args, "root", ""))
    types_dir: str = os.path.join(root_directory, args.types_dir)
    client_dir: str = os.path.join(root_directory, args.client_dir)
    types_import: str = getattr(args, "types_import", None) or types_dir
    output_name: str = getattr(args, "output_name", OUTPUT_FILE_NAME)
    skip_typeshare: bool = getattr(args, "skip_typeshare", False)
    strict_bindings: bool = getattr(args, "strict_bindings", False)
    nested_generics: bool = getattr(args, "nested_generics", False)

    classifier = FileClassifier(
        bindings_file_name=getattr(args, "bindings_file", BINDINGS_FILE_NAME),
        rpc_marker=getattr(args, "rpc_marker", RPC_MARKER),
        handler_suffix=getattr(args, "handler_suffix", HANDLER_SUFFIX),
        excluded_directory=getattr(args, "exclude_dir", EXCLUDED_DIRECTORY),
    )

    if not skip_typeshare:
        run_typeshare(root, os.path.join(types_dir, classifier.bindings_file_name))

    directory = Directory.new(root)
    content = generate_client(
        directory,
        classifier,
        types_import,
        strict_bindings=strict_bindings,
        depth_aware=nested_generics,
    )

    output_path = write_client(content, client_dir, output_name)
    logger.info("Wrote client to '%s'.", output_path)
