"""Generate the TypeScript RPC client from the extracted handler descriptors."""

from __future__ import annotations

import logging

from rpc_stub_generator.bindings import BindingCatalog
from rpc_stub_generator.rpc_types import ParamShape
from rpc_stub_generator.type_mapper import classify_param, map_return_payload, map_type
from rpc_stub_generator.writer_dto import ClientModuleCollection, HandlerDescriptor

logger = logging.getLogger(__name__)

INDENT = "    "

BANNER = """//*********************************************************************************
//***THIS FILE IS GENERATED AUTOMATICALLY AND WILL BE OVERWRITTEN. DO NOT MODIFY***
//*********************************************************************************"""

PREAMBLE = """
export type ListOptions = {
  limit?: number,
  offset?: number,
  order_bys?: string,
};

export type DataRpcResult<T> = {
    data: T
};

export type RpcResult<T> = { id: string, jsonrpc: number, result: DataRpcResult<T> };

export type ClientErrorValue = {
  data: {
    detail: ClientError["detail"]
    req_uuid: string
  },
  message: ClientError["message"]
};

export type RpcError = { id: string, jsonrpc: number, error: ClientErrorValue };

export type ParamsIded = { id: string };

export type ParamsForCreate<T> = { data: T };

export type ParamsForUpdate<T> = { id: string, data: T };

export type ParamsList<T> = {
  filters?: Partial<Record<keyof T, any>>[],
  list_options?: {
    limit?: number,
    offset?: number,
    order_bys?: string,
  }
};

const reqConfig: RequestInit = {
        method: "POST",
        headers: {
          "Content-Type": "application/json",
        },
        credentials: "include",
      };
"""

# Indentation of the closing brace of a non-empty `params` object.
PARAMS_OBJECT_CLOSE = " " * 10 + "}"

# Lines of the `params` object of the request body, `{name}` is the client parameter name.
PARAMS_OBJECT_LINES: dict[str, list[str]] = {
    ParamShape.CREATED: ["...{name}"],
    ParamShape.UPDATED: ['"id": {name}.id,', '"data": {name}.data,'],
    ParamShape.LISTED: ["...{name},"],
    ParamShape.IDENTIFIED: ['"id": {name}.id'],
    ParamShape.UNCLASSIFIED: [],
}


class Writer:
    """A class that handles writing the client file, based on the handlers found in the workspace."""

    def __init__(self, catalog: BindingCatalog, types_dir: str, strict_bindings: bool = False):
        """Initialize the client writer.

        Args:
            catalog (BindingCatalog): All types declared in the generated bindings.
            types_dir (str): Directory of the bindings, used in the import statements.
            strict_bindings (bool): Skip handlers whose types are missing from the bindings.
        """
        self._catalog = catalog
        self._types_dir = types_dir
        self._strict_bindings = strict_bindings
        self._clients = ClientModuleCollection()

    @property
    def clients(self) -> ClientModuleCollection:
        return self._clients

    @property
    def imports(self) -> list[str]:
        """The import statements of the generated client."""
        imports = []
        if len(self._catalog):
            imports.append(f'import type {{{", ".join(self._catalog.names)}}} from "{self._types_dir}/bindings";')
        imports.append(f'export * from "{self._types_dir}";')
        imports.append('import { baseApiUrl, handleError } from ".";')
        imports.append('import { Try, Err } from "@oxi";')
        return imports

    def _check_bindings(self, descriptor: HandlerDescriptor, client_param_type: str, client_return_type: str) -> bool:
        unknown = [t for t in (client_param_type, client_return_type) if not self._catalog.knows_type(t)]
        if not unknown:
            return True

        logger.warning(
            f"Handler: {descriptor.name}, type(s) {', '.join(unknown)} do not exist in bindings"
            + (", skipping." if self._strict_bindings else ".")
        )
        return not self._strict_bindings

    def render_function(self, descriptor: HandlerDescriptor) -> str:
        """Render the client function of a single handler.

        Only the first handler parameter is sent, as the JSON-RPC `params` object.

        Args:
            descriptor (HandlerDescriptor): The handler to render, must have a parameter.

        Returns:
            str: The function text, as a member of the client object.
        """
        param = descriptor.first_param
        client_param_type = map_type(param.type_text)
        client_return_type = map_return_payload(descriptor.result_type_text)
        shape = classify_param(param.type_text)

        params_lines = [f"{INDENT * 3}{line.format(name=param.name)}\n" for line in PARAMS_OBJECT_LINES[shape]]
        params_object = f"{{\n{''.join(params_lines)}{PARAMS_OBJECT_CLOSE}" if params_lines else "{}"

        logger.debug(f"Rendering {descriptor.name}({param.name}: {client_param_type}) as {shape}")

        return f"""    async {descriptor.name}({param.name}: {client_param_type}) {{
      const happyPath = async () => fetch(`${{baseApiUrl}}/api/rpc`, {{
        ...reqConfig,
        body: JSON.stringify({{
          id: 1,
          jsonrpc: "2.0",
          method: "{descriptor.name}",
          params: {params_object},
        }}),
      }}) as unknown as Promise<RpcResult<{client_return_type}>>;
      const val = await Try(happyPath, (e: RpcError) => Err(e));
      if (val.isError && handleError){{
          handleError(val);
      }}
      return val;
    }},
"""

    def add_handler(self, descriptor: HandlerDescriptor) -> bool:
        """Render a handler and add it to the client of its entity.

        Args:
            descriptor (HandlerDescriptor): The handler to add.

        Returns:
            bool: Whether a client function was added.
        """
        if not descriptor.is_renderable:
            logger.debug(f"Skipping handler '{descriptor.name}' without parameters")
            return False

        client_param_type = map_type(descriptor.first_param.type_text)
        client_return_type = map_return_payload(descriptor.result_type_text)
        if not self._check_bindings(descriptor, client_param_type, client_return_type):
            return False

        self._clients.add_function(descriptor.entity_tag, self.render_function(descriptor))
        return True

    def dumps_clients(self) -> str:
        """One exported client object per entity, in the order the entities were found."""
        out: list[str] = []
        for entity_tag, functions in self._clients.modules.items():
            functions_text = "\n".join(functions)
            out.append(f"\n\nexport const {entity_tag}_client = {{\n{functions_text}\n}};\n")

        return "".join(out)

    def dumps(self) -> str:
        """Generates string output for the client file.

        Returns:
            str: The output string.
        """
        out: list[str] = []
        out.append(BANNER)
        out.append("")
        out.append("\n".join(self.imports))
        out.append(PREAMBLE)
        out.append(self.dumps_clients())

        return "\n".join(out)
