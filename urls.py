from django.contrib import admin
from django.urls import include, path
from django.urls import re_path

import formreview.review.urls

urlpatterns = [
    # Django built-in
    re_path(r'^admin/', admin.site.urls),

    # formreview apps
    path('reviews/', include(formreview.review.urls)),
]
