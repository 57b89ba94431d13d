from django.urls import path
from . import views

app_name = 'options'

urlpatterns = [
    # Storefront markup
    path('render/', views.render_options_view, name='render'),

    # Checkout cart transform
    path('cart-transform/run/', views.cart_transform_run_view, name='cart_transform_run'),
]
