from django.urls import path

from . import views

urlpatterns = [
    # Auth
    path('auth/admin-login', views.StaffLoginView.as_view(), name='admin-login'),
    path('auth/token/refresh', views.StaffTokenRefreshView.as_view(), name='token-refresh'),
    path('auth/change-password/<int:account_id>', views.ChangePasswordView.as_view(), name='change-password'),

    # Staff
    path('admin/addAdmin', views.AddAdminView.as_view(), name='add-admin'),
    path('admin/addFollowUp', views.AddFollowUpView.as_view(), name='add-followup'),
    path('admin/staff', views.StaffListView.as_view(), name='staff-list'),
    path('admin/staff/<int:account_id>', views.StaffDetailView.as_view(), name='staff-detail'),
    path('admin/toggleStatus/<int:account_id>', views.ToggleStaffStatusView.as_view(), name='toggle-status'),

    # Pledges
    path('admin/addPledge', views.AddPledgeView.as_view(), name='add-pledge'),
    path('admin/pledges', views.PledgeListView.as_view(), name='pledge-list'),
    path('admin/pledges/<int:pledge_id>', views.PledgeDetailView.as_view(), name='pledge-detail'),
    path('admin/updatePledge/<int:pledge_id>', views.UpdatePledgeView.as_view(), name='update-pledge'),
    path('admin/archivePledge/<int:pledge_id>', views.ArchivePledgeView.as_view(), name='archive-pledge'),
    path('admin/myPledges', views.MyPledgesView.as_view(), name='my-pledges'),

    # Assignment
    path('admin/assignPledgeToFollowUp', views.AssignPledgeView.as_view(), name='assign-pledge'),
    path('admin/assignMultiplePledgesToFollowUp', views.AssignMultiplePledgesView.as_view(), name='assign-multiple-pledges'),
    path('admin/unassignPledge', views.UnassignPledgeView.as_view(), name='unassign-pledge'),

    # Reports
    path('admin/reports/totalCollectionStats', views.TotalCollectionStatsView.as_view(), name='total-collection-stats'),
    path(
        'admin/reports/monthlyCollectionReport/<int:year>/<int:month>',
        views.MonthlyCollectionReportView.as_view(),
        name='monthly-collection-report',
    ),
    path('admin/reports/followUpPerformance/<int:account_id>', views.FollowUpPerformanceView.as_view(), name='followup-performance'),
    path('admin/reports/overduePledges', views.OverduePledgesView.as_view(), name='overdue-pledges'),
]
