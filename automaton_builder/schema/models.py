"""Pydantic models for the serialized automaton snapshot."""

from pydantic import BaseModel, ConfigDict, Field


class SerializedState(BaseModel):
    """A state as it appears in a snapshot."""

    id: str
    x: float = 0.0
    y: float = 0.0
    label: str = ""


class SerializedToken(BaseModel):
    """An alphabet token as it appears in a snapshot."""

    id: str
    symbol: str = ""


class SerializedTransition(BaseModel):
    """A transition as it appears in a snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    dest: str
    is_epsilon_transition: bool = Field(default=False, alias="isEpsilonTransition")
    tokens: list[str] = Field(default_factory=list)


class Snapshot(BaseModel):
    """Root model for a saved automaton."""

    model_config = ConfigDict(populate_by_name=True)

    states: list[SerializedState] = Field(default_factory=list)
    alphabet: list[SerializedToken] = Field(default_factory=list)
    transitions: list[SerializedTransition] = Field(default_factory=list)
    start_state: str | None = Field(default=None, alias="startState")
    accept_states: list[str] = Field(default_factory=list, alias="acceptStates")

    def get_state(self, state_id: str) -> SerializedState | None:
        """Get a state by id."""
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def get_token(self, token_id: str) -> SerializedToken | None:
        for token in self.alphabet:
            if token.id == token_id:
                return token
        return None

    def to_dict(self) -> dict:
        """Dump the snapshot using its wire (camelCase) keys."""
        return self.model_dump(by_alias=True)
