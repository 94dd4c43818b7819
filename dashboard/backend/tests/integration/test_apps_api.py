"""
Integration tests for app lifecycle API
"""
import pytest

from core.exceptions import RemoteCallError


class TestSessionRequired:
    """Requests without a session user"""

    def test_not_logged_in(self, client):
        response = client.get("/api/apps", params={"clusterCode": "c1"})
        assert response.status_code == 401
        assert response.json()["code"] == "ERROR_NOT_LOGIN"


class TestClustersAPI:
    """Tests for /api/clusters"""

    def test_superuser(self, client, login, superuser):
        login(superuser)
        response = client.get("/api/clusters")
        assert response.status_code == 200
        assert [c["code"] for c in response.json()] == ["c1", "c2"]

    def test_acl_user(self, client, login, app_user):
        login(app_user)
        response = client.get("/api/clusters")
        assert response.json() == [{"code": "c1", "name": "prod", "isAdmin": False}]


class TestListAppsAPI:
    """Tests for GET /api/apps"""

    def test_list_apps(self, client, login, superuser, mock_remote, sample_app_list):
        login(superuser)
        mock_remote.return_value = sample_app_list

        response = client.get("/api/apps", params={"clusterCode": "c1"})
        assert response.status_code == 200
        data = response.json()
        assert [entry["name"] for entry in data["success"]] == ["app1", "app2"]
        assert len(data["error"]) == 1

    def test_cluster_unauthorized(self, client, login, app_user, mock_remote):
        login(app_user)
        response = client.get("/api/apps", params={"clusterCode": "c2"})
        assert response.status_code == 403
        assert response.json() == {"code": "ERROR", "message": "Cluster unauthorized"}
        mock_remote.assert_not_called()

    def test_unknown_cluster(self, client, login, superuser, mock_remote):
        login(superuser)
        response = client.get("/api/apps", params={"clusterCode": "nope"})
        assert response.status_code == 400
        assert response.json() == {"code": "ERROR", "message": "cluster config not found: nope"}
        mock_remote.assert_not_called()


class TestAppOperationsAPI:
    """Tests for mutating app endpoints"""

    @pytest.mark.parametrize("method,url,remote_path", [
        ("post", "/api/delete/app1_1.0.0_1", "/api/delete/app1_1.0.0_1"),
        ("post", "/api/restart/app1_1.0.0_1", "/api/restart/app1_1.0.0_1"),
        ("post", "/api/reload/app1_1.0.0_1", "/api/reload/app1_1.0.0_1"),
        ("post", "/api/start/app1_1.0.0_1", "/api/start/app1_1.0.0_1"),
        ("post", "/api/stop/app1_1.0.0_1", "/api/stop/app1_1.0.0_1"),
    ])
    def test_json_body(self, client, login, app_user, mock_remote, mock_oplog, method, url, remote_path):
        login(app_user)
        mock_remote.return_value = {"code": "SUCCESS", "data": {"status": "ok"}}

        response = getattr(client, method)(url, json={"clusterCode": "c1"})
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert mock_remote.call_args.args[0] == remote_path
        mock_oplog.assert_called_once()

    def test_form_body(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post("/api/restart/app1", data={"clusterCode": "c1"})
        assert response.status_code == 200
        _, options = mock_remote.call_args.args
        assert (options.method, options.timeout) == ("POST", 30000)

    def test_client_id_from_forwarded_header(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        client.post(
            "/api/start/app1",
            json={"clusterCode": "c1"},
            headers={"X-Forwarded-For": "10.1.1.1, 10.2.2.2"},
        )
        assert mock_oplog.call_args.kwargs["client_id"] == "10.1.1.1,10.2.2.2"

    def test_clean_exit_record(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.request(
            "DELETE", "/api/clean_exit_record/__ADMIN___0.0.0_0", json={"clusterCode": "c1"}
        )
        assert response.status_code == 200
        path, options = mock_remote.call_args.args
        assert path == "/api/clean_exit_record/__ADMIN__"
        assert options.method == "DELETE"

    def test_app_unauthorized(self, client, login, app_user, mock_remote, mock_oplog):
        login(app_user)
        response = client.post("/api/stop/app2_1.0.0_1", json={"clusterCode": "c1"})
        assert response.status_code == 403
        assert response.json()["code"] == "ERROR"
        mock_remote.assert_not_called()

    def test_missing_cluster_code(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post("/api/delete/app1")
        assert response.status_code == 400
        assert response.json()["code"] == "ERROR"
        mock_remote.assert_not_called()
        mock_oplog.assert_not_called()

    def test_remote_failure(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        mock_remote.return_value = {"code": "FAIL", "message": "disk full"}

        response = client.post("/api/start/app1", json={"clusterCode": "c1"})
        assert response.status_code == 500
        assert response.json() == {"code": "FAIL", "message": "disk full"}

    def test_remote_timeout(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        mock_remote.side_effect = RemoteCallError("request timeout: http://h1/api/stop/app1", code="TIMEOUT")

        response = client.post("/api/stop/app1", json={"clusterCode": "c1"})
        assert response.status_code == 502
        assert response.json()["code"] == "TIMEOUT"


class TestPublishAPI:
    """Tests for POST /api/publish"""

    def test_publish(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        mock_remote.return_value = {"code": "SUCCESS", "data": {"appId": "app1_1.0.0_2"}}

        response = client.post(
            "/api/publish",
            params={"clusterCode": "c1"},
            files={"pkg": ("app1.tgz", b"package-bytes", "application/gzip")},
        )
        assert response.status_code == 200
        assert response.json() == {"appId": "app1_1.0.0_2"}

        path, options = mock_remote.call_args.args
        assert path == "/api/publish"
        assert (options.method, options.timeout) == ("POST", 120000)
        assert options.files["pkg"][0] == "app1.tgz"
        assert mock_oplog.call_args.args[2] == "app1.tgz"

    def test_package_empty(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post("/api/publish", params={"clusterCode": "c1"}, data={"note": "x"})
        assert response.status_code == 400
        assert response.json()["code"] == "ERROR_APP_PACKAGE_EMPTY"
        mock_remote.assert_not_called()
        assert mock_oplog.call_args.args[2] == "UNKNOWN_FILE_NAME"

    def test_upload_failed(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post(
            "/api/publish",
            params={"clusterCode": "c1"},
            content=b"not-a-multipart-body",
            headers={"Content-Type": "multipart/form-data"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "ERROR_UPLOAD_APP_PACKAGE_FAILED"
        mock_remote.assert_not_called()
        mock_oplog.assert_called_once()

    def test_unknown_cluster_after_upload(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post(
            "/api/publish",
            params={"clusterCode": "nope"},
            files={"pkg": ("app1.tgz", b"package-bytes", "application/gzip")},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "ERROR"
        mock_remote.assert_not_called()
        mock_oplog.assert_called_once()

    def test_remote_failure(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        mock_remote.return_value = {"code": "ERROR_PUBLISH", "message": "bad package"}
        response = client.post(
            "/api/publish",
            params={"clusterCode": "c1"},
            files={"pkg": ("app1.tgz", b"package-bytes", "application/gzip")},
        )
        assert response.status_code == 500
        assert response.json() == {"code": "ERROR_PUBLISH", "message": "bad package"}


class TestMalformedRequests:
    """Malformed bodies are answered with {code, message}"""

    def test_non_string_cluster_code(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post("/api/restart/app1", json={"clusterCode": ["c1"]})
        assert response.status_code == 400
        assert response.json() == {"code": "ERROR", "message": "clusterCode must be a string"}
        mock_remote.assert_not_called()
        mock_oplog.assert_not_called()

    def test_invalid_json(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post(
            "/api/restart/app1",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"code": "ERROR", "message": "invalid JSON body"}

    def test_malformed_multipart(self, client, login, superuser, mock_remote, mock_oplog):
        login(superuser)
        response = client.post(
            "/api/restart/app1",
            content=b"garbage",
            headers={"Content-Type": "multipart/form-data"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "ERROR"
        assert data["message"].startswith("invalid form body")
        mock_remote.assert_not_called()

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"code": "ERROR", "message": "Not Found"}
