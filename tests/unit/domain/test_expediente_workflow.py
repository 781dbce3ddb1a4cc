"""
Name: Expediente Workflow Unit Tests

Responsibilities:
  - Validate the transition table (pairs x roles x justification)
  - Validate the editability rule (role checked before state)
  - Validate the actions exposed to the detail view

Notes:
  - Pure functions: no repositories, no FastAPI
"""

import pytest
from sii_dicri.domain.entities import EstadoExpediente as E
from sii_dicri.domain.entities import UserRole as R
from sii_dicri.domain.errors import (
    EditForbiddenError,
    ExpedienteNotEditableError,
    InvalidTransitionError,
    JustificationRequiredError,
    RuleErrorCode,
    TransitionForbiddenError,
)
from sii_dicri.domain.expediente_workflow import (
    allowed_transitions,
    can_create,
    can_edit,
    check_editable,
    check_transition,
)

pytestmark = pytest.mark.unit

TECNICO = frozenset({R.TECNICO})
COORDINADOR = frozenset({R.COORDINADOR})
ADMIN = frozenset({R.ADMIN})
NONE = frozenset()


class TestCheckTransition:
    @pytest.mark.parametrize(
        "origen,destino,roles",
        [
            (E.BORRADOR, E.REVISION, TECNICO),
            (E.BORRADOR, E.REVISION, ADMIN),
            (E.RECHAZADO, E.REVISION, TECNICO),
            (E.REVISION, E.APROBADO, COORDINADOR),
            (E.REVISION, E.APROBADO, ADMIN),
        ],
    )
    def test_allowed_transitions_return_no_justification(self, origen, destino, roles):
        assert check_transition(origen, destino, roles) is None

    def test_reject_stores_trimmed_justification(self):
        stored = check_transition(
            E.REVISION, E.RECHAZADO, COORDINADOR, "  Falta cadena de custodia  "
        )
        assert stored == "Falta cadena de custodia"

    @pytest.mark.parametrize("justificacion", [None, "", "   "])
    def test_reject_without_justification_fails(self, justificacion):
        with pytest.raises(JustificationRequiredError) as exc_info:
            check_transition(E.REVISION, E.RECHAZADO, COORDINADOR, justificacion)
        assert exc_info.value.code == RuleErrorCode.VALIDATION_ERROR

    def test_justification_is_dropped_outside_rechazado(self):
        assert check_transition(E.RECHAZADO, E.REVISION, TECNICO, "texto viejo") is None

    @pytest.mark.parametrize(
        "origen,destino",
        [
            (E.BORRADOR, E.APROBADO),
            (E.BORRADOR, E.RECHAZADO),
            (E.APROBADO, E.REVISION),
            (E.APROBADO, E.BORRADOR),
            (E.RECHAZADO, E.APROBADO),
            (E.REVISION, E.BORRADOR),
            (E.REVISION, E.REVISION),
        ],
    )
    def test_invalid_pairs_are_conflicts_even_for_admin(self, origen, destino):
        with pytest.raises(InvalidTransitionError) as exc_info:
            check_transition(origen, destino, ADMIN, "x")
        assert exc_info.value.code == RuleErrorCode.CONFLICT

    def test_coordinador_cannot_send_to_review(self):
        with pytest.raises(TransitionForbiddenError) as exc_info:
            check_transition(E.BORRADOR, E.REVISION, COORDINADOR)
        assert exc_info.value.code == RuleErrorCode.FORBIDDEN

    def test_tecnico_cannot_approve(self):
        with pytest.raises(TransitionForbiddenError):
            check_transition(E.REVISION, E.APROBADO, TECNICO)

    def test_role_is_checked_before_justification(self):
        with pytest.raises(TransitionForbiddenError):
            check_transition(E.REVISION, E.RECHAZADO, TECNICO, None)

    def test_pair_is_checked_before_role(self):
        with pytest.raises(InvalidTransitionError):
            check_transition(E.APROBADO, E.REVISION, NONE)


class TestEditability:
    @pytest.mark.parametrize("estado", [E.BORRADOR, E.RECHAZADO])
    @pytest.mark.parametrize("roles", [TECNICO, ADMIN])
    def test_editable_states_for_editors(self, estado, roles):
        check_editable(estado, roles)
        assert can_edit(estado, roles) is True

    @pytest.mark.parametrize("estado", [E.REVISION, E.APROBADO])
    def test_locked_states_are_conflicts(self, estado):
        with pytest.raises(ExpedienteNotEditableError) as exc_info:
            check_editable(estado, TECNICO)
        assert exc_info.value.code == RuleErrorCode.CONFLICT
        assert can_edit(estado, TECNICO) is False

    @pytest.mark.parametrize("estado", list(E))
    def test_coordinador_alone_is_forbidden_in_any_state(self, estado):
        with pytest.raises(EditForbiddenError):
            check_editable(estado, COORDINADOR)
        assert can_edit(estado, COORDINADOR) is False

    def test_coordinador_with_tecnico_can_edit(self):
        assert can_edit(E.BORRADOR, COORDINADOR | TECNICO) is True

    def test_can_create(self):
        assert can_create(TECNICO)
        assert can_create(ADMIN)
        assert not can_create(COORDINADOR)
        assert not can_create(NONE)


class TestAllowedTransitions:
    def test_tecnico_in_borrador(self):
        assert allowed_transitions(E.BORRADOR, TECNICO) == [E.REVISION]

    def test_coordinador_in_revision(self):
        assert allowed_transitions(E.REVISION, COORDINADOR) == [
            E.APROBADO,
            E.RECHAZADO,
        ]

    def test_approved_is_terminal(self):
        assert allowed_transitions(E.APROBADO, ADMIN) == []

    def test_tecnico_in_revision_has_no_actions(self):
        assert allowed_transitions(E.REVISION, TECNICO) == []
