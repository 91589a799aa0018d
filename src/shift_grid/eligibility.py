"""
Eligibility Resolver

Decides whether a location/team pairing lets an employee work a slot under
the active team filter, and which employees and locations the filter
leaves visible.
"""

from typing import AbstractSet, Iterable, List, Optional

from .assignment_store import AssignmentStore
from .models import Employee, Location

# Location tag that meets every team filter
ALL_TEAMS = "All Teams"


class EitherTeamMatches:
    """Eligibility rule: the employee's teams OR the location's teams meet the filter.

    This is a disjunction. A shared location such as a break room tagged
    "All Teams" takes employees from outside the filtered teams under any
    filter, and a filtered-team employee can work a location outside them.
    """

    name = "either_team_matches"

    @staticmethod
    def location_matches(location: Optional[Location], team_filter: AbstractSet[str]) -> bool:
        if location is None:
            return False
        return any(team == ALL_TEAMS or team in team_filter for team in location.teams)

    def __call__(self, employee: Employee, location: Optional[Location],
                 team_filter: AbstractSet[str]) -> bool:
        if not team_filter:
            return True
        if any(team in team_filter for team in employee.teams):
            return True
        return self.location_matches(location, team_filter)


ELIGIBILITY_RULE = EitherTeamMatches()


def is_eligible(employee: Employee, location: Optional[Location],
                team_filter: AbstractSet[str]) -> bool:
    """Check if the employee may be assigned to the location under the team filter.

    ``location`` may be None for a location name that is not configured; it
    then contributes no teams.
    """
    return ELIGIBILITY_RULE(employee, location, team_filter)


def visible_locations(locations: Iterable[Location], team_filter: AbstractSet[str]) -> List[Location]:
    """Locations shown under the filter, in their configured order"""
    locations = list(locations)
    if not team_filter:
        return locations
    return [loc for loc in locations if ELIGIBILITY_RULE.location_matches(loc, team_filter)]


def visible_employees(employees: Iterable[Employee], store: AssignmentStore,
                      locations: Iterable[Location], team_filter: AbstractSet[str]) -> List[Employee]:
    """Employees shown under the filter.

    An employee is shown when one of their teams is filtered, or when they
    already work at a location that carries a filtered team.
    """
    employees = list(employees)
    if not team_filter:
        return employees

    matching_locations = {loc.name for loc in visible_locations(locations, team_filter)}
    visible = []
    for employee in employees:
        if any(team in team_filter for team in employee.teams):
            visible.append(employee)
        elif any(a.location in matching_locations for a in store.assignments_for(employee.id)):
            visible.append(employee)
    return visible
