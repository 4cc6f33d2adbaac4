from fastapi import APIRouter
from nextchapter.api import version_prefix
from nextchapter.admin.routes import admin_router
from nextchapter.books.routes import books_router
from nextchapter.cart.routes import carts_router
from nextchapter.orders.routes import orders_router
from nextchapter.payments.routes import payments_router
from nextchapter.reviews.routes import reviews_router
from nextchapter.wishlist.routes import wishlist_router
from nextchapter.common.routes import home_router


public_routers = APIRouter(prefix=version_prefix)

public_routers.include_router(books_router, prefix="/books",tags=["books"])
public_routers.include_router(carts_router,prefix="/cart",tags=["cart"])
public_routers.include_router(wishlist_router,prefix="/wishlist",tags=["wishlist"])
public_routers.include_router(payments_router,prefix="/payment",tags=["payment"])
public_routers.include_router(reviews_router,prefix="/orders/review",tags=["reviews"])
public_routers.include_router(orders_router,prefix="/orders",tags=["orders"])
public_routers.include_router(home_router,tags=["home"])

#--------------------------------------------------------------------------------------------------------

admin_routers = APIRouter(prefix=f"{version_prefix}/admin")

admin_routers.include_router(admin_router,tags=["admin"])
