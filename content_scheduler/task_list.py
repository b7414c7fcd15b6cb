from __future__ import annotations

from typing import Dict, List, NamedTuple, Sequence

from pydantic import BaseModel

from .schemas import HospitalRecord, QuotaSnapshot, TaskInstance


class TaskDefinition(BaseModel):
    type: str
    duration: float
    label: str


TASK_DEFINITIONS: Dict[str, TaskDefinition] = {
    "sanwi_nosul": TaskDefinition(type="sanwi_nosul", duration=3.5, label="상위노출"),
    "brand": TaskDefinition(type="brand", duration=3.5, label="브랜드"),
    "trend": TaskDefinition(type="trend", duration=1.5, label="트렌드"),
    "eonron_bodo": TaskDefinition(type="eonron_bodo", duration=0.5, label="언론보도"),
    "jisikin": TaskDefinition(type="jisikin", duration=0.5, label="지식인"),
    "forum_post": TaskDefinition(type="forum_post", duration=0.5, label="카페 포스팅"),
    "report": TaskDefinition(type="report", duration=2.0, label="보고서"),
}

# 교차 배치 대상이 아닌 작업들 (이 순서대로 뒤에 붙는다)
OTHER_TASK_ORDER = ("sanwi_nosul", "eonron_bodo", "jisikin", "forum_post")


class TaskList(NamedTuple):
    instances: List[TaskInstance]
    main: List[TaskInstance]
    other: List[TaskInstance]

    @property
    def total_hours(self) -> float:
        return sum(t.duration for t in self.instances)


def make_instance(task_type: str, hospital: HospitalRecord) -> TaskInstance:
    definition = TASK_DEFINITIONS[task_type]
    return TaskInstance(type=definition.type,
                        label=definition.label,
                        duration=definition.duration,
                        hospital_id=hospital.id,
                        hospital_name=hospital.name)


def main_type_order(quota: QuotaSnapshot) -> List[str]:
    """brand_order/trend_order 중 작은 값이 먼저 (같으면 브랜드 먼저)"""
    if quota.trend_order < quota.brand_order:
        return ["trend", "brand"]
    return ["brand", "trend"]


def sanwi_nosul_count(hospital: HospitalRecord, quota: QuotaSnapshot) -> int:
    # 병원 관리에서 일자를 지정했으면 일자 개수가 곧 작업 수
    if hospital.sanwi_nosul_days:
        return len(hospital.sanwi_nosul_days)
    return quota.sanwi_nosul


def interleave_main(order: Sequence[str], counts: Dict[str, int]) -> List[str]:
    out: List[str] = []
    for i in range(max(counts.values(), default=0)):
        for task_type in order:
            if i < counts.get(task_type, 0):
                out.append(task_type)
    return out


def build_task_list(hospital: HospitalRecord, quota: QuotaSnapshot) -> TaskList:
    main_types = interleave_main(main_type_order(quota),
                                 {"brand": quota.brand, "trend": quota.trend})
    main = [make_instance(t, hospital) for t in main_types]

    other_counts = {
        "sanwi_nosul": sanwi_nosul_count(hospital, quota),
        "eonron_bodo": quota.eonron_bodo,
        "jisikin": quota.jisikin,
        "forum_post": quota.forum_post,
    }
    other: List[TaskInstance] = []
    for task_type in OTHER_TASK_ORDER:
        other.extend(make_instance(task_type, hospital)
                     for _ in range(other_counts[task_type]))

    return TaskList(instances=main + other, main=main, other=other)
