from django.urls import path
from . import views

urlpatterns = [
    # Compile a regex into lexemes, warnings, NFA and graph layout
    path('api/compile-regex/', views.compile_regex_view, name='compile_regex'),

    # Hover information on a lexeme
    path('api/token-info/', views.token_info, name='token_info'),

    # Step by step simulation
    path('api/simulate-regex/', views.simulate_regex, name='simulate_regex'),
    path('api/simulate-regex-stream/', views.simulate_regex_stream, name='simulate_regex_stream'),
]
