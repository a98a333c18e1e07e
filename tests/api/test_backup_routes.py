def test_backup_lifecycle(client, admin_headers):
    status = client.get("/api/backup?action=status", headers=admin_headers).get_json()
    assert status["enabled"] is True
    assert status["lastBackup"] is None

    resp = client.post("/api/backup", headers=admin_headers)
    backup = resp.get_json()["backup"]
    assert backup["type"] == "manual"
    assert backup["createdBy"] == "admin"
    assert set(backup["databases"]) == {"attendance", "auth"}

    listed = client.get("/api/backup", headers=admin_headers).get_json()["backups"]
    assert [b["id"] for b in listed] == [backup["id"]]
    assert listed[0]["totalSize"] > 0

    verify = client.get(f"/api/backup/{backup['id']}?action=verify", headers=admin_headers).get_json()
    assert verify["valid"] is True

    resp = client.get(f"/api/backup/{backup['id']}/download?db=auth", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.data.startswith(b"SQLite format 3")
    resp.close()

    restored = client.post(f"/api/backup/{backup['id']}", headers=admin_headers).get_json()
    assert restored == {"success": True, "restoredFrom": backup["id"]}

    assert client.delete(f"/api/backup/{backup['id']}", headers=admin_headers).get_json() == {"success": True}
    assert client.get(f"/api/backup/{backup['id']}", headers=admin_headers).status_code == 404


def test_backup_errors(client, admin_headers, clerk):
    assert client.get("/api/backup/manual-missing?action=verify", headers=admin_headers).status_code == 404
    backup = client.post("/api/backup", headers=admin_headers).get_json()["backup"]
    resp = client.get(f"/api/backup/{backup['id']}/download?db=other", headers=admin_headers)
    assert resp.status_code == 400

    _, headers = clerk
    assert client.get("/api/backup", headers=headers).status_code == 403
    assert client.post("/api/backup", headers=headers).status_code == 403
