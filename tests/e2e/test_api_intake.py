"""
test_api_intake.py - Intake API E2E 테스트

엔드포인트:
- GET /addItem
- GET /getTime
- GET /health
"""

import copy
from pathlib import Path

from fastapi.testclient import TestClient

from src.app.main import create_app

# =============================================================================
# GET /health, /getTime
# =============================================================================


class TestHealth:
    """헬스 체크."""

    def test_health(self, client: TestClient):
        """GET /health → {"ok": true}."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestGetTime:
    """서버 시각."""

    def test_returns_epoch_ms(self, client: TestClient):
        """serverTime은 ms 정수."""
        response = client.get("/getTime")

        body = response.json()
        assert response.status_code == 200
        assert body["ok"] is True
        assert isinstance(body["serverTime"], int)
        assert body["serverTime"] > 1_600_000_000_000

    def test_non_decreasing(self, client: TestClient):
        """연속 호출 → 감소하지 않음."""
        values = [client.get("/getTime").json()["serverTime"] for _ in range(10)]

        assert values == sorted(values)


# =============================================================================
# GET /addItem
# =============================================================================


class TestAddItem:
    """레코드 기록."""

    def test_writes_record(self, client: TestClient, log_path: Path):
        """기록 성공 → written = 한 줄."""
        response = client.get("/addItem", params={"code": "ABC123", "qtty": "3"})

        body = response.json()
        assert response.status_code == 200
        assert body["ok"] is True
        code, qtty, _ = body["written"].split("|")
        assert (code, qtty) == ("ABC123", "3")
        assert log_path.read_text(encoding="utf-8") == body["written"] + "\n"

    def test_explicit_date(self, client: TestClient):
        """date 지정 → 그대로 기록."""
        now = client.get("/getTime").json()["serverTime"]

        response = client.get("/addItem", params={"code": "A", "qtty": "1", "date": str(now)})

        assert response.json()["written"] == f"A|1|{now}"

    def test_small_qtty_written_positionally(self, client: TestClient, log_path: Path):
        """qtty=0.00001 → 0.00001 그대로 (지수 표기 아님)."""
        response = client.get("/addItem", params={"code": "A", "qtty": "0.00001", "date": "1000"})

        assert response.json()["written"] == "A|0.00001|1000"
        assert log_path.read_text(encoding="utf-8") == "A|0.00001|1000\n"

    def test_pipe_in_code_replaced(self, client: TestClient, log_path: Path):
        """code=A%7CB → A_B, 필드 3개 유지."""
        response = client.get("/addItem?code=A%7CB&qtty=3")

        assert response.status_code == 200
        line = log_path.read_text(encoding="utf-8").strip()
        assert line.startswith("A_B|3|")
        assert len(line.split("|")) == 3

    def test_same_burst_accumulates(self, client: TestClient, log_path: Path):
        """연속 기록 → 줄 누적."""
        for code in ("A", "B", "C"):
            client.get("/addItem", params={"code": code, "qtty": "1"})

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert [line.split("|")[0] for line in lines] == ["A", "B", "C"]

    def test_stale_log_rotated(self, client: TestClient, log_path: Path):
        """오래된 세션 → 파일 비우고 새 줄만."""
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.write_text("OLD|1|1000\n", encoding="utf-8")

        client.get("/addItem", params={"code": "NEW", "qtty": "2"})

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("NEW|2|")


class TestAddItemValidation:
    """검증 실패 → 400, 파일 변화 없음."""

    def test_invalid_qtty(self, client: TestClient, log_path: Path):
        """qtty=abc → 400."""
        response = client.get("/addItem", params={"code": "ABC", "qtty": "abc"})

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert "qtty" in body["error"]
        assert not log_path.exists()

    def test_invalid_qtty_keeps_existing_log(self, client: TestClient, log_path: Path):
        """기존 로그 내용 유지."""
        client.get("/addItem", params={"code": "A", "qtty": "1"})
        before = log_path.read_text(encoding="utf-8")

        client.get("/addItem", params={"code": "B", "qtty": "abc"})

        assert log_path.read_text(encoding="utf-8") == before

    def test_missing_code(self, client: TestClient, log_path: Path):
        """code 없음 → 400."""
        response = client.get("/addItem", params={"qtty": "1"})

        assert response.status_code == 400
        assert "code" in response.json()["error"]
        assert not log_path.exists()

    def test_missing_qtty(self, client: TestClient):
        """qtty 없음 → 400."""
        response = client.get("/addItem", params={"code": "ABC"})

        assert response.status_code == 400

    def test_invalid_date(self, client: TestClient, log_path: Path):
        """date=0 → 400."""
        response = client.get("/addItem", params={"code": "ABC", "qtty": "1", "date": "0"})

        assert response.status_code == 400
        assert "date" in response.json()["error"]
        assert not log_path.exists()

    def test_zero_qtty_accepted(self, client: TestClient):
        """qtty=0 → 서버는 허용 (기본 설정)."""
        response = client.get("/addItem", params={"code": "ABC", "qtty": "0"})

        assert response.status_code == 200

    def test_zero_qtty_rejected_when_enforced(self, test_config: dict, log_path: Path):
        """require_positive_qtty=true → 400."""
        config = copy.deepcopy(test_config)
        config["intake"]["require_positive_qtty"] = True

        with TestClient(create_app(config)) as client:
            response = client.get("/addItem", params={"code": "ABC", "qtty": "0"})

        assert response.status_code == 400
        assert not log_path.exists()


class TestAddItemStorageFailure:
    """쓰기 실패 → 500 JSON, 프로세스 유지."""

    def test_write_failure(self, test_config: dict, tmp_path: Path):
        """로그 경로가 디렉터리 → 500."""
        config = copy.deepcopy(test_config)
        bad_path = tmp_path / "log_is_dir"
        bad_path.mkdir()
        config["paths"]["log_file"] = str(bad_path)

        with TestClient(create_app(config)) as client:
            response = client.get("/addItem", params={"code": "ABC", "qtty": "1"})
            health = client.get("/health")

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Could not write to the intake log"}
        assert health.status_code == 200
