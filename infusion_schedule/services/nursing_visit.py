"""Patient-facing nursing visit paragraph for the printed calendar."""

from infusion_schedule.core.bag_schedule.alerts import is_caregiver_managed

NURSE_MANAGED_SUMMARY = (
    "All bag changes, central line care and lab draws (if ordered) will be "
    "managed by an infusion Registered Nurse. If you have any questions or "
    "concerns, please contact your infusion pharmacy."
)

WEEKLY_RN_SUMMARY = (
    "You or your caregiver have been taught to manage your own bag changes. "
    "An RN will still visit weekly for central line care and labs. The "
    "tentative RN visit day is: {visit_day}. If you have any questions or "
    "concerns, please contact your infusion pharmacy."
)

HOSPITAL_LABS_SUMMARY = (
    "You or a family member/caregiver will be managing your own bag changes. "
    "Central line care and labs will be managed at your hospital clinic or "
    "provider's office. These visits should have already been arranged. An "
    "RN visit may be required for certain bag change situations. If there "
    "are any changes to your bag change schedule, a member of the infusion "
    "pharmacy care team will notify you. Please contact us if you have any "
    "questions or concerns."
)

# Substrings of the free-text nursing visit plan
WEEKLY_RN_PLAN_MARKER = "rn to do lab"
HOSPITAL_LABS_PLAN_MARKER = "lab/drsg done at hospital"


def nursing_visit_summary(
    bag_change_by: str | None,
    nursing_visit_plan: str | None = None,
    nursing_visit_day: str | None = None,
) -> str | None:
    """Pick the nursing visit paragraph for a patient.

    Returns None for a caregiver-managed patient whose visit plan matches
    neither known arrangement.
    """
    if not is_caregiver_managed(bag_change_by):
        return NURSE_MANAGED_SUMMARY

    plan = (nursing_visit_plan or "").lower()
    if WEEKLY_RN_PLAN_MARKER in plan:
        return WEEKLY_RN_SUMMARY.format(
            visit_day=nursing_visit_day or "[not provided]"
        )
    if HOSPITAL_LABS_PLAN_MARKER in plan:
        return HOSPITAL_LABS_SUMMARY
    return None
