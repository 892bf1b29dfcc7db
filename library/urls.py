from django.urls import path
from . import api, views

urlpatterns = [
path('', views.index_view, name='home'),
path('simple/', views.simple_view, name='simple'),
path('hello/<str:name>/', views.hello_view, name='hello_world'),
path('http-client/', views.http_client_view, name='http_client_demo'),
path('secured/', views.secured_page_view, name='secured_page'),
path('token/', views.csrf_token_view, name='csrf_token'),
path('is-logged-in/', views.is_logged_in_view, name='is_logged_in'),
# Resource api
path('api/', api.api_entrypoint, name='api_entrypoint'),
path('api/books/<int:pk>/<str:relation>/', api.book_subresource_view, name='api_book_subresource'),
path('api/<str:resource>/', api.collection_view, name='api_collection'),
path('api/<str:resource>/<int:pk>/', api.item_view, name='api_item'),
]
