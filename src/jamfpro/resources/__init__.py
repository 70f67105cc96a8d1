"""
Resource services.

Each service maps one resource family onto JamfProClient.send:
path templates, payload models and, for computers and computer groups,
read-after-write reconciliation.
"""

from jamfpro.resources.api_roles import ApiRole, ApiRoleRequest, ApiRolesService
from jamfpro.resources.buildings import Building, BuildingRequest, BuildingsService
from jamfpro.resources.categories import CategoriesService, Category, CategoryRequest
from jamfpro.resources.computer_groups import (
    ComputerGroup,
    ComputerGroupCriterion,
    ComputerGroupRequest,
    ComputerGroupsService,
)
from jamfpro.resources.computers import (
    Computer,
    ComputerGeneral,
    ComputerGeneralRequest,
    ComputerRequest,
    ComputersService,
)
from jamfpro.resources.departments import Department, DepartmentRequest, DepartmentsService
from jamfpro.resources.equivalence import (
    are_computer_records_equivalent,
    are_groups_equivalent,
)
from jamfpro.resources.user_accounts import (
    Privileges,
    UserAccount,
    UserAccountRequest,
    UserAccountsService,
)

__all__ = [
    # Buildings
    "Building",
    "BuildingRequest",
    "BuildingsService",
    # Categories
    "Category",
    "CategoryRequest",
    "CategoriesService",
    # Departments
    "Department",
    "DepartmentRequest",
    "DepartmentsService",
    # API roles
    "ApiRole",
    "ApiRoleRequest",
    "ApiRolesService",
    # Computers
    "Computer",
    "ComputerGeneral",
    "ComputerGeneralRequest",
    "ComputerRequest",
    "ComputersService",
    # Computer groups
    "ComputerGroup",
    "ComputerGroupCriterion",
    "ComputerGroupRequest",
    "ComputerGroupsService",
    # User accounts
    "Privileges",
    "UserAccount",
    "UserAccountRequest",
    "UserAccountsService",
    # Equivalence
    "are_groups_equivalent",
    "are_computer_records_equivalent",
]
