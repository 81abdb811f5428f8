from supabase import Client
from app.modules.meal_plans.schemas import MealPlan, MealSlot, normalize_day, normalize_meal_type
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

TABLE = "meal_plans"


def rows_to_plan(rows: list) -> MealPlan:
    """Fold slot rows into {day: {meal_type: meal_name}}."""
    plan: MealPlan = {}
    for row in rows:
        plan.setdefault(row["day"], {})[row["meal_type"]] = row["meal_name"]
    return plan


class MealPlanService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_meal_plan(self, user_id: str) -> MealPlan:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            return rows_to_plan(result.data or [])
        except Exception as e:
            logger.error(f"Error fetching meal plan: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch meal plan")

    def save_meal(self, slot: MealSlot, user_id: str) -> MealPlan:
        """Insert or replace one slot, then return the whole plan."""
        try:
            self.supabase.table(TABLE)\
                .upsert({
                    "user_id": user_id,
                    "day": slot.day,
                    "meal_type": slot.meal_type,
                    "meal_name": slot.meal_name,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }, on_conflict="user_id,day,meal_type")\
                .execute()
        except Exception as e:
            logger.error(f"Error saving meal: {e}")
            raise HTTPException(status_code=500, detail="Failed to save meal")
        return self.get_meal_plan(user_id)

    def remove_meal(self, day: str, meal_type: str, user_id: str) -> MealPlan:
        try:
            day, meal_type = normalize_day(day), normalize_meal_type(meal_type)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            self.supabase.table(TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .eq("day", day)\
                .eq("meal_type", meal_type)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing meal: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove meal")
        return self.get_meal_plan(user_id)

    def sync_meal_plan(self, meal_plan: MealPlan, user_id: str) -> MealPlan:
        """Replace every slot of the user's plan with the given plan."""
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            {
                "user_id": user_id,
                "day": day,
                "meal_type": meal_type,
                "meal_name": meal_name,
                "updated_at": now,
            }
            for day, meals in meal_plan.items()
            for meal_type, meal_name in meals.items()
            if meal_name
        ]
        try:
            self.supabase.table(TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting old meals: {e}")
            raise HTTPException(status_code=500, detail="Failed to sync meal plan")
        if rows:
            try:
                self.supabase.table(TABLE).insert(rows).execute()
            except Exception as e:
                logger.error(f"Error inserting meals: {e}")
                raise HTTPException(status_code=500, detail="Failed to sync meal plan")
        logger.info(f"Synced meal plan for {user_id}: {len(rows)} slot(s)")
        return rows_to_plan(rows)
