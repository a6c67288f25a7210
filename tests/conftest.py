"""Pytest configuration and fixtures for rpc stub generator tests."""

from __future__ import annotations

from pathlib import Path

import pytest

BINDINGS_TS = """/*
 Generated by typeshare 1.7.0
*/

export interface Patient {
	id: string;
	name: string;
}

export interface PatientForCreate {
	name: string;
}

export interface PatientForUpdate {
	name?: string;
}

export interface PatientFilter {
	name?: string;
}

export interface Task {
	id: string;
	title: string;
}

export interface TaskForCreate {
	title: string;
}

export interface TaskForUpdate {
	title?: string;
}

export interface TaskFilter {
	title?: string;
}

export type ClientError = {
	message: string;
	detail?: string;
};
"""

# Declarative convention: every route is generated by `generate_common_rpc_fns!`.
PATIENT_RPC = """use crate::router_builder;
use lib_core::model::patient::{Patient, PatientBmc, PatientFilter, PatientForCreate, PatientForUpdate};
use lib_rpc_core::prelude::*;

pub fn rpc_router_builder() -> RouterBuilder {
    router_builder!(
        // Same as RpcRouter::new().add_dyn("name", name.into_dyn())...
        get_patient,
        create_patient,
        list_patients,
        archive_patient,
    )
}

generate_common_rpc_fns!(
    Bmc: PatientBmc,
    Entity: Patient,
    ForCreate: PatientForCreate,
    ForUpdate: PatientForUpdate,
    Filter: PatientFilter,
    Suffix: patient
);
"""

# Explicit convention: every handler is written by hand and registered with `.into_dyn()`.
TASK_RPC = """use lib_core::model::task::{Task, TaskBmc, TaskFilter, TaskForCreate, TaskForUpdate};
use lib_rpc_core::prelude::*;

pub fn rpc_router() -> RpcRouter {
    rpc_router!(
        create_task.into_dyn(),
        list_tasks.into_dyn(),
        update_task.into_dyn(),
        delete_task.into_dyn(),
        ping_task.into_dyn(),
        count_tasks.into_dyn(),
    )
}

pub async fn create_task(ctx: Ctx, mm: ModelManager, params: ParamsForCreate<TaskForCreate>) -> Result<DataRpcResult<Task>> {
    let ParamsForCreate { data } = params;
    let id = TaskBmc::create(&ctx, &mm, data).await?;
    let task = TaskBmc::get(&ctx, &mm, id).await?;
    Ok(task.into())
}

pub async fn list_tasks(
    ctx: Ctx,
    mm: ModelManager,
    params: ParamsList<TaskFilter>,
) -> Result<DataRpcResult<Vec<Task>>> {
    let tasks = TaskBmc::list(&ctx, &mm, params.filters, params.list_options).await?;
    Ok(tasks.into())
}

pub async fn update_task(ctx: Ctx, mm: ModelManager, params: ParamsForUpdate<TaskForUpdate>) -> Result<DataRpcResult<Task>> {
    let ParamsForUpdate { id, data } = params;
    TaskBmc::update(&ctx, &mm, id, data).await?;
    let task = TaskBmc::get(&ctx, &mm, id).await?;
    Ok(task.into())
}

pub async fn delete_task(ctx: Ctx, mm: ModelManager, params: ParamsIded) -> Result<DataRpcResult<Task>> {
    let ParamsIded { id } = params;
    let task = TaskBmc::get(&ctx, &mm, id).await?;
    TaskBmc::delete(&ctx, &mm, id).await?;
    Ok(task.into())
}

pub async fn ping_task(ctx: Ctx, message: String) -> Result<()> {
    Ok(())
}
"""

# No handlers under either convention.
UTILS_RPC = """use lib_rpc_core::prelude::*;

pub fn to_value(id: i64) -> Value {
    json!({ "id": id })
}
"""

RPC_SOURCE_DIR = Path("backend") / "crates" / "libs" / "lib-rpc" / "src" / "rpcs"
TYPES_DIR = Path("frontend") / "src" / "lib" / "types"
CLIENT_DIR = Path("frontend") / "src" / "lib" / "api" / "client"


@pytest.fixture
def rust_workspace(tmp_path):
    """Create a small workspace with typeshare bindings and rpc-router handler files."""
    root = tmp_path / "workspace"

    types_dir = root / TYPES_DIR
    types_dir.mkdir(parents=True)
    (types_dir / "bindings.ts").write_text(BINDINGS_TS, encoding="utf8")

    (root / CLIENT_DIR).mkdir(parents=True)

    rpc_dir = root / RPC_SOURCE_DIR
    rpc_dir.mkdir(parents=True)
    (rpc_dir / "patient_rpc.rs").write_text(PATIENT_RPC, encoding="utf8")
    (rpc_dir / "task_rpc.rs").write_text(TASK_RPC, encoding="utf8")
    (rpc_dir / "utils_rpc.rs").write_text(UTILS_RPC, encoding="utf8")
    (rpc_dir / "mod.rs").write_text("pub mod patient_rpc;\npub mod task_rpc;\n", encoding="utf8")

    # Build artifacts are never scanned
    target_dir = root / "backend" / "target" / "debug" / "build" / "lib-rpc"
    target_dir.mkdir(parents=True)
    (target_dir / "ghost_rpc.rs").write_text(TASK_RPC, encoding="utf8")
    (target_dir / "bindings.ts").write_text("export interface Ghost {\n}\n", encoding="utf8")

    yield root
