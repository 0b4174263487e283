from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


# clients check for 201 here, keep it
@router.get("/hitme", status_code=status.HTTP_201_CREATED)
async def hitme():
    return {"msg": "Server is Hitted Up and Running"}
