"""The ordered lifecycle steps.

Every step performs one platform or data-plane mutation and then checks
what the app shows afterwards. Later steps assume everything before them
succeeded; the state machine enforces that ordering.
"""

from __future__ import annotations

from ..errors import PreconditionError, assertion_failed
from ..shared.logging import get_logger
from .context import RunContext
from .machine import LifecycleState as S
from .machine import Step

logger = get_logger(__name__)

INDEX_FILE = "index.html"
INDEX_TEXT = "test"
TEXT_FILE = "test.txt"
FOLDER = "test"

# Appended to the location for the move step; the first prefix still
# matches the moved app when resolving.
RELOCATION_SUFFIX = "2"


# ── Shared verifications ──


def _sessions_login(ctx: RunContext, with_cli: bool = True) -> None:
    ctx.auth.login(ctx.app)
    if with_cli:
        ctx.dataplane.login(ctx.app.fqdn, ctx.credentials.username, ctx.credentials.password)


def _check_index(ctx: RunContext) -> None:
    ctx.checks.file_is_listed(ctx.app, INDEX_FILE)
    ctx.checks.file_is_served(ctx.app, INDEX_FILE, INDEX_TEXT)
    ctx.checks.index_is_served(ctx.app, INDEX_TEXT)


def _uninstall(ctx: RunContext) -> None:
    # Leave the app's hostname before it disappears
    ctx.session.blank()
    ctx.platform.uninstall(ctx.app.id)
    ctx.handle = None


# ── Actions ──


def install(ctx: RunContext) -> None:
    ctx.platform.install(ctx.config.location)
    ctx.resolve()


def login(ctx: RunContext) -> None:
    _sessions_login(ctx)


def upload_index(ctx: RunContext) -> None:
    ctx.dataplane.upload(ctx.fixture(INDEX_FILE))
    _check_index(ctx)


def delete_file(ctx: RunContext) -> None:
    ctx.dataplane.upload(ctx.fixture(TEXT_FILE))
    ctx.checks.file_is_listed(ctx.app, TEXT_FILE)
    ctx.dataplane.delete(TEXT_FILE)
    ctx.checks.file_is_gone(ctx.app, TEXT_FILE)
    ctx.checks.file_is_unlisted(TEXT_FILE)


def upload_folder(ctx: RunContext) -> None:
    ctx.dataplane.upload(ctx.fixture(FOLDER))
    ctx.checks.folder_exists(FOLDER, TEXT_FILE)


def logout(ctx: RunContext) -> None:
    ctx.auth.logout(ctx.app)


def backup(ctx: RunContext) -> None:
    ctx.platform.backup_create(ctx.app.id)
    records = ctx.platform.backup_list(ctx.app.id)
    if not records:
        raise PreconditionError(
            message=f"No backups listed for app {ctx.app.id}",
            data={"app_id": ctx.app.id},
        )
    # Platform lists most recent first
    ctx.backup = records[0]
    logger.info("backup selected", backup_id=ctx.backup.id, created_at=ctx.backup.created_at)


def restore(ctx: RunContext) -> None:
    ctx.platform.uninstall(ctx.app.id)
    ctx.platform.install(ctx.config.location)
    ctx.resolve()
    ctx.platform.restore(ctx.app.id, ctx.backup.id)


def verify_restore(ctx: RunContext) -> None:
    _sessions_login(ctx, with_cli=False)
    _check_index(ctx)
    ctx.checks.file_is_gone(ctx.app, TEXT_FILE)
    ctx.checks.file_is_unlisted(TEXT_FILE)
    ctx.checks.folder_exists(FOLDER, TEXT_FILE)
    ctx.auth.logout(ctx.app)


def relocate(ctx: RunContext) -> None:
    before = ctx.app
    ctx.session.clear_cookies()
    ctx.session.blank()
    ctx.platform.configure(before.id, f"{ctx.config.location}{RELOCATION_SUFFIX}")
    after = ctx.resolve()

    if after.id != before.id:
        raise assertion_failed("app id after move", before.id, after.id)
    if after.fqdn == before.fqdn:
        raise assertion_failed("fqdn changes after move", f"not {before.fqdn}", after.fqdn)


def delete_folder(ctx: RunContext) -> None:
    _sessions_login(ctx)
    _check_index(ctx)
    ctx.checks.folder_exists(FOLDER, TEXT_FILE)
    ctx.dataplane.delete(FOLDER, recursive=True)
    ctx.checks.folder_is_gone(FOLDER)
    ctx.auth.logout(ctx.app)


def uninstall(ctx: RunContext) -> None:
    _uninstall(ctx)


def store_install(ctx: RunContext) -> None:
    ctx.platform.install(ctx.config.location, appstore_id=ctx.config.appstore_id)
    ctx.resolve()
    _sessions_login(ctx)
    ctx.dataplane.upload(ctx.fixture(INDEX_FILE))
    _check_index(ctx)
    ctx.auth.logout(ctx.app)


def update(ctx: RunContext) -> None:
    ctx.platform.update(ctx.config.location)
    _sessions_login(ctx, with_cli=False)
    _check_index(ctx)
    ctx.auth.logout(ctx.app)


LIFECYCLE_STEPS: list[Step] = [
    Step("install", "Install app and resolve it", S.NOT_INSTALLED, S.INSTALLED, install),
    Step("login", "Log in to UI and data-plane CLI", S.INSTALLED, S.LOGGED_IN, login, ("handle",)),
    Step(
        "upload-index",
        "Upload index.html; listed and served",
        S.LOGGED_IN,
        S.INDEX_UPLOADED,
        upload_index,
        ("handle",),
    ),
    Step(
        "delete-file",
        "Upload test.txt, delete it; 404 and unlisted",
        S.INDEX_UPLOADED,
        S.FILE_DELETED,
        delete_file,
        ("handle",),
    ),
    Step(
        "upload-folder",
        "Upload folder; folder and member listed",
        S.FILE_DELETED,
        S.FOLDER_UPLOADED,
        upload_folder,
        ("handle",),
    ),
    Step("logout", "Log out of the UI", S.FOLDER_UPLOADED, S.POPULATED, logout, ("handle",)),
    Step(
        "backup",
        "Create backup, select most recent",
        S.POPULATED,
        S.BACKED_UP,
        backup,
        ("handle",),
    ),
    Step(
        "restore",
        "Uninstall, reinstall, restore from backup",
        S.BACKED_UP,
        S.RESTORED,
        restore,
        ("handle", "backup"),
    ),
    Step(
        "verify-restore",
        "Restored content present, deleted file still gone",
        S.RESTORED,
        S.RESTORE_VERIFIED,
        verify_restore,
        ("handle",),
    ),
    Step(
        "relocate",
        "Move to new location; same id, new address",
        S.RESTORE_VERIFIED,
        S.RELOCATED,
        relocate,
        ("handle",),
    ),
    Step(
        "delete-folder",
        "Content reachable after move; delete folder recursively",
        S.RELOCATED,
        S.FOLDER_DELETED,
        delete_folder,
        ("handle",),
    ),
    Step("uninstall", "Uninstall app", S.FOLDER_DELETED, S.REMOVED, uninstall, ("handle",)),
    Step(
        "store-install",
        "Install published package; upload and serve index.html",
        S.REMOVED,
        S.STORE_INSTALLED,
        store_install,
    ),
    Step(
        "update",
        "Update in place; content still served",
        S.STORE_INSTALLED,
        S.UPDATED,
        update,
        ("handle",),
    ),
    Step("final-uninstall", "Uninstall app", S.UPDATED, S.FINISHED, uninstall, ("handle",)),
]
