from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import requests
from mcp.server.fastmcp import FastMCP

BACKEND_BASE_URL = os.getenv("BACKEND_BASE_URL", "http://localhost:8000").rstrip("/")
BACKEND_API_BASE = os.getenv("BACKEND_API_BASE", "/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("MCP_BACKEND_TIMEOUT", "15"))
DEBUG_MODE = os.getenv("MCP_DEBUG", "0").strip() in ("1", "true", "True", "yes")

mcp = FastMCP("content-scheduler")


def _log_tool_call(tool_name: str, input_data: Dict[str, Any], output_data: Dict[str, Any]) -> None:
  """도구 호출 입출력을 터미널에 출력"""
  if not DEBUG_MODE:
    return
  print(f"\n{'='*80}")
  print(f"Tool: {tool_name}")
  print(json.dumps(input_data, indent=2, ensure_ascii=False, default=str))
  print(json.dumps(output_data, indent=2, ensure_ascii=False, default=str))
  print(f"{'='*80}\n")


def _api_path(path: str) -> str:
  return f"{BACKEND_API_BASE}/{path.lstrip('/')}"


def _request(method: str,
             path: str,
             params: Optional[Dict[str, Any]] = None,
             payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
  url = f"{BACKEND_BASE_URL}{path}"
  try:
    resp = requests.request(method,
                            url,
                            params=params,
                            json=payload,
                            timeout=REQUEST_TIMEOUT)
  except requests.RequestException as exc:
    return {
        "ok": False,
        "code": "request_failed",
        "message": f"Backend request failed: {exc}",
    }

  try:
    data = resp.json()
  except ValueError:
    data = {"raw": resp.text}

  if resp.status_code >= 400:
    return {
        "ok": False,
        "code": "backend_error",
        "status": resp.status_code,
        "error": data,
    }

  return {"ok": True, "data": data}


def _invalid(tool_name: str, message: str, input_data: Dict[str, Any]) -> Dict[str, Any]:
  result = {"ok": False, "code": "invalid_request", "message": message}
  _log_tool_call(tool_name, input_data, result)
  return result


@mcp.tool(name="hospitals.list")
def hospitals_list() -> Dict[str, Any]:
  result = _request("GET", _api_path("/hospitals"))
  _log_tool_call("hospitals.list", {}, result)
  return result


@mcp.tool(name="quota.upsert")
def quota_upsert(
    hospital_id: int,
    year: int,
    month: int,
    brand: int = 0,
    trend: int = 0,
    sanwi_nosul: int = 0,
    eonron_bodo: int = 1,
    jisikin: int = 1,
    forum_post: int = 0,
    deadline_pull_days: int = 0,
    brand_order: int = 1,
    trend_order: int = 2,
    work_start_date: Optional[str] = None,
    work_end_date: Optional[str] = None,
) -> Dict[str, Any]:
  payload = {
      "hospital_id": hospital_id,
      "year": year,
      "month": month,
      "brand": brand,
      "trend": trend,
      "sanwi_nosul": sanwi_nosul,
      "eonron_bodo": eonron_bodo,
      "jisikin": jisikin,
      "forum_post": forum_post,
      "deadline_pull_days": deadline_pull_days,
      "brand_order": brand_order,
      "trend_order": trend_order,
      "work_start_date": work_start_date,
      "work_end_date": work_end_date,
  }
  result = _request("POST", _api_path("/monthly-tasks"), payload=payload)
  _log_tool_call("quota.upsert", payload, result)
  return result


@mcp.tool(name="schedule.generate")
def schedule_generate(hospital_id: int, year: int, month: int) -> Dict[str, Any]:
  payload = {"hospital_id": hospital_id, "year": year, "month": month}
  if not 1 <= month <= 12:
    return _invalid("schedule.generate", "month must be between 1 and 12.", payload)
  result = _request("POST", _api_path("/schedules/generate"), payload=payload)
  if not result.get("ok"):
    # 시간 부족 같은 업무 오류는 그대로 노출
    error = result.get("error")
    if isinstance(error, dict) and isinstance(error.get("error"), dict):
      result["schedule_error"] = error["error"]
  _log_tool_call("schedule.generate", payload, result)
  return result


@mcp.tool(name="schedule.list")
def schedule_list(year: int,
                  month: int,
                  hospital_id: Optional[int] = None) -> Dict[str, Any]:
  input_data = {"year": year, "month": month, "hospital_id": hospital_id}
  result = _request("GET", _api_path(f"/schedules/{year}/{month}"))
  if result.get("ok") and hospital_id is not None:
    data = result.get("data")
    if isinstance(data, list):
      items: List[Dict[str, Any]] = [
          item for item in data
          if isinstance(item, dict) and item.get("hospital_id") == hospital_id
      ]
      result["data"] = items
  _log_tool_call("schedule.list", input_data, result)
  return result


@mcp.tool(name="vacations.add")
def vacations_add(vacation_date: str, description: Optional[str] = None) -> Dict[str, Any]:
  payload = {"vacation_date": vacation_date, "description": description}
  if not vacation_date or not vacation_date.strip():
    return _invalid("vacations.add", "vacation_date is required (YYYY-MM-DD).", payload)
  result = _request("POST", _api_path("/vacations"), payload=payload)
  _log_tool_call("vacations.add", payload, result)
  return result


if __name__ == "__main__":
  import uvicorn

  host = os.getenv("MCP_HOST", "0.0.0.0")
  port = int(os.getenv("MCP_PORT", "8001"))
  uvicorn.run(mcp.streamable_http_app(), host=host, port=port)
