"""Tests for SessionManager: lifecycle, read-only mode and write-back."""

import threading
from datetime import datetime, timedelta, timezone

import openpyxl
import pytest

from docedit.exceptions import (
    DocumentTypeMismatchError,
    NotFoundError,
    ParameterValidationError,
    ReadOnlySessionError,
    SessionLimitError,
    SessionNotFoundError,
    ValidationError,
)
from docedit.handlers import build_registries
from docedit.operations import OperationParameters
from docedit.sessions import DocumentType, SessionManager, SessionMode


@pytest.fixture(scope="module")
def registries():
    return build_registries()


@pytest.fixture
def manager(logger):
    return SessionManager(max_sessions=3, logger=logger)


@pytest.fixture
def xlsx_file(tmp_path):
    path = tmp_path / "book.xlsx"
    workbook = openpyxl.Workbook()
    workbook.active["A1"] = "initial"
    workbook.save(path)
    return path


def cell_value(path, address="A1"):
    return openpyxl.load_workbook(path).active[address].value


def write_cell(manager, registries, session_id, value):
    return manager.run(
        session_id,
        registries["excel_cell"],
        "write",
        OperationParameters({"cell": "A1", "value": value}),
    )


class TestOpen:
    """Test opening sessions"""

    def test_open_reports_session_info(self, manager, xlsx_file):
        """Test open returns id, domain and mode"""
        info = manager.open(str(xlsx_file))
        assert info.domain is DocumentType.EXCEL
        assert info.mode is SessionMode.READWRITE
        assert info.modified is False
        assert info.path == str(xlsx_file.resolve())

    def test_open_missing_file(self, manager, tmp_path):
        """Test a missing file is a not-found error"""
        with pytest.raises(NotFoundError):
            manager.open(str(tmp_path / "absent.xlsx"))

    def test_open_unknown_extension(self, manager, tmp_path):
        """Test unsupported extensions are validation errors"""
        path = tmp_path / "notes.txt"
        path.write_text("x")
        with pytest.raises(ParameterValidationError):
            manager.open(str(path))

    def test_open_invalid_mode(self, manager, xlsx_file):
        """Test the mode must be readonly or readwrite"""
        with pytest.raises(ParameterValidationError) as exc_info:
            manager.open(str(xlsx_file), mode="append")
        assert exc_info.value.parameter == "mode"

    def test_open_respects_session_limit(self, manager, xlsx_file):
        """Test max_sessions caps open sessions"""
        for _ in range(3):
            manager.open(str(xlsx_file), mode="readonly")
        with pytest.raises(SessionLimitError):
            manager.open(str(xlsx_file))

    def test_open_respects_file_size_limit(self, logger, xlsx_file):
        """Test files above max_file_size_mb are rejected"""
        manager = SessionManager(max_file_size_mb=0.000001, logger=logger)
        with pytest.raises(ParameterValidationError):
            manager.open(str(xlsx_file))


class TestRun:
    """Test executing operations in sessions"""

    def test_run_mutating_operation_marks_session_modified(self, manager, registries, xlsx_file):
        """Test a write marks the session modified without touching the file"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "changed")
        assert manager.get(info.session_id).modified is True
        assert cell_value(xlsx_file) == "initial"

    def test_read_only_session_rejects_mutation_before_execution(self, manager, registries, xlsx_file):
        """Test read-only sessions refuse mutating operations"""
        info = manager.open(str(xlsx_file), mode="readonly")
        with pytest.raises(ReadOnlySessionError):
            write_cell(manager, registries, info.session_id, "changed")
        with manager.context(info.session_id) as context:
            assert context.document.active["A1"].value == "initial"
        assert manager.get(info.session_id).modified is False

    def test_read_only_session_allows_reads(self, manager, registries, xlsx_file):
        """Test read-only sessions run read-only operations"""
        info = manager.open(str(xlsx_file), mode="readonly")
        result = manager.run(
            info.session_id, registries["excel_cell"], "get", OperationParameters({"cell": "A1"})
        )
        assert result.value == "initial"

    def test_wrong_domain_registry_rejected(self, manager, registries, xlsx_file):
        """Test a Word tool cannot run against a workbook session"""
        info = manager.open(str(xlsx_file))
        with pytest.raises(DocumentTypeMismatchError):
            manager.run(info.session_id, registries["word_text"], "get_statistics", OperationParameters())

    def test_unknown_session(self, manager, registries):
        """Test an unknown id is a session-not-found error"""
        with pytest.raises(SessionNotFoundError):
            write_cell(manager, registries, "nope", "x")

    def test_concurrent_calls_on_one_session(self, manager, registries, xlsx_file):
        """Test calls against one session are serialised"""
        info = manager.open(str(xlsx_file))
        errors = []

        def worker(row):
            try:
                manager.run(
                    info.session_id,
                    registries["excel_cell"],
                    "write",
                    OperationParameters({"cell": f"B{row}", "value": row}),
                )
            except ValidationError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(row,)) for row in range(1, 21)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        with manager.context(info.session_id) as context:
            values = [context.document.active[f"B{row}"].value for row in range(1, 21)]
        assert values == list(range(1, 21))


class TestSaveAndClose:
    """Test write-back"""

    def test_save_writes_and_clears_modified(self, manager, registries, xlsx_file):
        """Test saving to the source path writes the file and resets the flag"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "saved")

        output = manager.save(info.session_id)

        assert output.size_bytes > 0
        assert cell_value(xlsx_file) == "saved"
        assert manager.get(info.session_id).modified is False
        assert manager.get(info.session_id).last_saved_at is not None

    def test_save_as_keeps_modified(self, manager, registries, xlsx_file, tmp_path):
        """Test saving a copy elsewhere leaves the source unsaved"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "copy")
        target = tmp_path / "copy.xlsx"

        manager.save(info.session_id, str(target))

        assert cell_value(target) == "copy"
        assert cell_value(xlsx_file) == "initial"
        assert manager.get(info.session_id).modified is True

    def test_save_as_other_type_rejected(self, manager, xlsx_file, tmp_path):
        """Test the output path must keep the document type"""
        info = manager.open(str(xlsx_file))
        with pytest.raises(ParameterValidationError):
            manager.save(info.session_id, str(tmp_path / "book.docx"))

    def test_read_only_session_cannot_save_over_source(self, manager, xlsx_file, tmp_path):
        """Test read-only sessions may only save elsewhere"""
        info = manager.open(str(xlsx_file), mode="readonly")
        with pytest.raises(ReadOnlySessionError):
            manager.save(info.session_id)
        output = manager.save(info.session_id, str(tmp_path / "export.xlsx"))
        assert output.path.endswith("export.xlsx")

    def test_close_saves_modified_document(self, manager, registries, xlsx_file):
        """Test close writes back unsaved changes"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "closed")

        output = manager.close(info.session_id)

        assert output.saved is True
        assert cell_value(xlsx_file) == "closed"
        assert manager.list() == []

    def test_close_discard(self, manager, registries, xlsx_file):
        """Test discard drops unsaved changes"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "dropped")

        output = manager.close(info.session_id, discard=True)

        assert output.saved is False
        assert cell_value(xlsx_file) == "initial"

    def test_close_unmodified_does_not_write(self, manager, xlsx_file):
        """Test closing an unchanged document leaves the file alone"""
        mtime = xlsx_file.stat().st_mtime_ns
        info = manager.open(str(xlsx_file))
        output = manager.close(info.session_id)
        assert output.saved is False
        assert xlsx_file.stat().st_mtime_ns == mtime

    def test_close_all(self, manager, registries, xlsx_file):
        """Test close_all closes and saves every session"""
        first = manager.open(str(xlsx_file))
        manager.open(str(xlsx_file), mode="readonly")
        write_cell(manager, registries, first.session_id, "all")

        assert manager.close_all() == 2
        assert manager.list() == []
        assert cell_value(xlsx_file) == "all"


class TestCreate:
    """Test creating new documents"""

    @pytest.mark.parametrize(
        "name, domain",
        [
            ("new.xlsx", DocumentType.EXCEL),
            ("new.docx", DocumentType.WORD),
            ("new.pptx", DocumentType.POWERPOINT),
            ("new.pdf", DocumentType.PDF),
            ("new.eml", DocumentType.EMAIL),
        ],
    )
    def test_create_every_type(self, manager, tmp_path, name, domain):
        """Test create opens a blank document that is written on close"""
        path = tmp_path / name
        info = manager.create(str(path))
        assert info.domain is domain
        assert info.modified is True
        assert not path.exists()

        manager.close(info.session_id)
        assert path.exists()

    def test_create_refuses_existing_file(self, manager, xlsx_file):
        """Test create does not overwrite without overwrite=true"""
        with pytest.raises(ValidationError):
            manager.create(str(xlsx_file))

    def test_create_overwrite(self, manager, xlsx_file):
        """Test overwrite=true replaces the file on save"""
        info = manager.create(str(xlsx_file), overwrite=True)
        manager.save(info.session_id)
        assert cell_value(xlsx_file) is None


def later(minutes):
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


class TestIdleExpiry:
    """Test closing sessions left unused"""

    def test_idle_session_saved_and_closed(self, manager, registries, xlsx_file):
        """Test an expired read-write session writes its changes back"""
        info = manager.open(str(xlsx_file))
        write_cell(manager, registries, info.session_id, "expired")

        expired = manager.expire_idle(now=later(31))

        assert expired == [info.session_id]
        assert manager.list() == []
        assert cell_value(xlsx_file) == "expired"
        with pytest.raises(SessionNotFoundError):
            manager.get(info.session_id)

    def test_read_only_session_closed_without_writing(self, manager, xlsx_file):
        """Test an expired read-only session leaves the file alone"""
        mtime = xlsx_file.stat().st_mtime_ns
        info = manager.open(str(xlsx_file), mode="readonly")
        assert manager.expire_idle(now=later(31)) == [info.session_id]
        assert xlsx_file.stat().st_mtime_ns == mtime

    def test_recent_session_kept(self, manager, xlsx_file):
        """Test sessions used within the timeout stay open"""
        manager.open(str(xlsx_file))
        assert manager.expire_idle() == []
        assert manager.expire_idle(now=later(29)) == []
        assert len(manager.list()) == 1

    def test_only_stale_sessions_expire(self, manager, xlsx_file):
        """Test last_accessed decides per session"""
        stale = manager.open(str(xlsx_file), mode="readonly")
        fresh = manager.open(str(xlsx_file), mode="readonly")
        manager._sessions[stale.session_id].last_accessed = later(-45).isoformat()

        assert manager.expire_idle() == [stale.session_id]
        assert [info.session_id for info in manager.list()] == [fresh.session_id]

    def test_zero_timeout_disables_expiry(self, logger, xlsx_file):
        """Test idle_timeout_minutes=0 keeps sessions open"""
        manager = SessionManager(idle_timeout_minutes=0, logger=logger)
        manager.open(str(xlsx_file))
        assert manager.expire_idle(now=later(60 * 24 * 365)) == []
        assert len(manager.list()) == 1

    def test_busy_session_skipped(self, manager, xlsx_file):
        """Test a session in the middle of a call is not expired"""
        info = manager.open(str(xlsx_file))
        held = threading.Event()
        release = threading.Event()

        def hold():
            with manager.context(info.session_id):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=hold)
        thread.start()
        assert held.wait(5)
        try:
            assert manager.expire_idle(now=later(31)) == []
        finally:
            release.set()
            thread.join()
        assert len(manager.list()) == 1
