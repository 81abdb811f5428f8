from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.meal_plans.schemas import MealSlot, MealPlanSync, MealPlanResult
from app.modules.meal_plans.service import MealPlanService
from app.core.dependencies import get_request_user_id
from supabase import Client

router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


def get_meal_plan_service(supabase: Client = Depends(get_supabase)) -> MealPlanService:
    return MealPlanService(supabase)


@router.get("", response_model=MealPlanResult)
async def get_meal_plan(
    user_id: str = Depends(get_request_user_id),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    """Get the user's weekly plan"""
    return MealPlanResult(meal_plan=service.get_meal_plan(user_id))


@router.put("", response_model=MealPlanResult)
async def sync_meal_plan(
    plan_data: MealPlanSync,
    user_id: str = Depends(get_request_user_id),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    """Replace the user's whole weekly plan"""
    return MealPlanResult(meal_plan=service.sync_meal_plan(plan_data.meal_plan, user_id))


@router.put("/slots", response_model=MealPlanResult)
async def save_meal(
    slot: MealSlot,
    user_id: str = Depends(get_request_user_id),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    """Set the meal for one day/meal type"""
    return MealPlanResult(meal_plan=service.save_meal(slot, user_id))


@router.delete("/slots", response_model=MealPlanResult)
async def remove_meal(
    day: str,
    meal_type: str,
    user_id: str = Depends(get_request_user_id),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    """Clear one day/meal type"""
    return MealPlanResult(meal_plan=service.remove_meal(day, meal_type, user_id))
