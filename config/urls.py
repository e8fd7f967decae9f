# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Applications
    path('', include('apps.core.urls')),
    path('api/', include('apps.board.urls')),
]

# Admin titles
admin.site.site_header = 'Mini Trello Admin'
admin.site.site_title = 'Mini Trello'
admin.site.index_title = 'Administration'
