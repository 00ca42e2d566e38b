from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from logdrain.config import DEFAULT_SIM_THRESHOLD
from logdrain.mem.tokenizer import WILDCARD


@dataclass
class ParseOutput:
    template: int            # template id
    tokens: List[str]        # template tokens after this line, "*" at variable slots
    parameters: List[str]    # input tokens found at the "*" slots


@dataclass
class Template:
    id: int
    tokens: List[str]
    count: int = 1


def simseq(tokens: List[str], template_tokens: List[str]) -> int:
    """
    Number of aligned positions holding the exact same string.
    "*" is compared literally, it does not match everything.
    """
    return sum(1 for a, b in zip(tokens, template_tokens) if a == b)


@dataclass
class LogCluster:
    """
    All templates that share one token length and one first-token signature.
    """
    length: int
    templates: List[Template] = field(default_factory=list)

    def best_match(self, tokens: List[str]) -> Optional[Tuple[int, int]]:
        """
        Returns (index, score) of the highest scoring template, first one on ties.
        """
        best: Optional[Tuple[int, int]] = None
        for index, template in enumerate(self.templates):
            score = simseq(tokens, template.tokens)
            if best is None or score > best[1]:
                best = (index, score)
        return best

    def process(
        self,
        tokens: List[str],
        new_id: int,
        sim_threshold: float = DEFAULT_SIM_THRESHOLD,
    ) -> ParseOutput:
        if len(tokens) != self.length:
            raise ValueError(f"cluster holds {self.length}-token lines, got {len(tokens)} tokens")

        best = self.best_match(tokens)

        if best is not None and best[1] / self.length >= sim_threshold:
            template = self.templates[best[0]]
            template.count += 1
            for i, tok in enumerate(tokens):
                if template.tokens[i] != tok:
                    template.tokens[i] = WILDCARD
        else:
            template = Template(id=new_id, tokens=list(tokens))
            self.templates.append(template)

        parameters = [tok for tok, t in zip(tokens, template.tokens) if t == WILDCARD]

        return ParseOutput(
            template=template.id,
            tokens=list(template.tokens),
            parameters=parameters,
        )
