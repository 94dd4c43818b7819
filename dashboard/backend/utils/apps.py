"""
앱 목록 병합

여러 호스트에서 받은 앱 레코드를 이름 -> 버전(appId) 단위로 묶는다.
"""
from typing import Dict, List


def app_version_key(app: dict) -> str:
    """버전 식별자: appId, 없으면 <name>_<version>_<buildNum>"""
    if app.get("appId"):
        return app["appId"]
    return f"{app.get('name')}_{app.get('version')}_{app.get('buildNum')}"


def merge_app_info(ips: List[str], apps: List[dict]) -> List[dict]:
    """호스트별 앱 레코드를 앱 단위로 병합

    Args:
        ips: 응답한 호스트 IP 목록
        apps: 모든 호스트의 앱 레코드 (각 레코드에 ip 포함)

    Returns:
        [{name, versions: [{appId, version, buildNum, cluster: [...], allHosts}]}]
        첫 등장 순서를 유지한다.
    """
    merged: Dict[str, dict] = {}
    hosts = set(ips)

    for app in apps:
        name = app.get("name")
        entry = merged.setdefault(name, {"name": name, "versions": {}})

        key = app_version_key(app)
        version = entry["versions"].get(key)
        if version is None:
            version = {
                "appId": key,
                "version": app.get("version"),
                "buildNum": app.get("buildNum"),
                "cluster": [],
            }
            entry["versions"][key] = version
        version["cluster"].append(app)

    result = []
    for entry in merged.values():
        versions = []
        for version in entry["versions"].values():
            running_on = {item.get("ip") for item in version["cluster"]}
            version["allHosts"] = bool(hosts) and hosts <= running_on
            versions.append(version)
        result.append({"name": entry["name"], "versions": versions})
    return result
