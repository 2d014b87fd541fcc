"""Cross-domain knowledge synthesis: domain knowledge, syntheses, insights and patterns."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)

_KNOWLEDGE_SOURCES: dict[str, tuple[str, ...]] = {
    "researcher": ("pattern_analysis", "hypothesis_generation", "collaboration_effectiveness"),
    "domain_analyzer": ("cross_domain_analysis", "pattern_recognition", "optimization_strategies"),
    "architect": ("system_design", "performance_optimization", "collaboration_patterns"),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SynthesisType(Enum):
    """Kind of knowledge synthesis, serialised by variant name."""

    PATTERN_INTEGRATION = "PatternIntegration"
    CONCEPT_FUSION = "ConceptFusion"
    INSIGHT_COMBINATION = "InsightCombination"
    META_LEARNING = "MetaLearning"
    EMERGENCE_PREDICTION = "EmergencePrediction"


class InsightType(Enum):
    """Kind of cross-domain insight, serialised by variant name."""

    PATTERN_TRANSFER = "PatternTransfer"
    BEST_PRACTICE_TRANSFER = "BestPracticeTransfer"
    OPTIMIZATION_TRANSFER = "OptimizationTransfer"
    SECURITY_TRANSFER = "SecurityTransfer"
    PERFORMANCE_TRANSFER = "PerformanceTransfer"
    LEARNING_TRANSFER = "LearningTransfer"


@dataclass
class KnowledgeSynthesis:
    """Knowledge combined from several source domains."""

    source_domains: list[str]
    synthesis_type: SynthesisType
    description: str
    confidence: float
    emergence_potential: float
    implications: list[str] = field(default_factory=list)
    evidence: list[str] = field(default_factory=list)
    synthesis_id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=_now)


@dataclass
class CrossDomainInsight:
    """An insight carried from source domains into a target domain."""

    source_domains: list[str]
    target_domain: str
    insight_type: InsightType
    description: str
    confidence: float
    applicability: float
    emergence_contribution: float
    insight_id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=_now)


@dataclass
class IntegrationPattern:
    """A reusable method for integrating knowledge across domains."""

    pattern_id: str
    name: str
    description: str
    source_domains: list[str]
    integration_method: str
    success_rate: float
    emergence_potential: float
    use_cases: list[str] = field(default_factory=list)


@dataclass
class DomainKnowledge:
    """What is known about one domain."""

    domain: str
    patterns: list[str] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    best_practices: list[str] = field(default_factory=list)
    common_issues: list[str] = field(default_factory=list)
    optimization_strategies: list[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=_now)
    emergence_contributions: list[float] = field(default_factory=list)


def load_domain_knowledge() -> dict[str, DomainKnowledge]:
    """Knowledge for each known source domain, keyed by domain name."""
    knowledge = {}
    for domain in _KNOWLEDGE_SOURCES:
        knowledge[domain] = DomainKnowledge(
            domain=domain,
            patterns=[f"{domain}_pattern_1", f"{domain}_pattern_2"],
            insights=[f"{domain}_insight_1", f"{domain}_insight_2"],
            best_practices=[f"{domain}_best_practice_1", f"{domain}_best_practice_2"],
            common_issues=[f"{domain}_issue_1", f"{domain}_issue_2"],
            optimization_strategies=[f"{domain}_optimization_1", f"{domain}_optimization_2"],
            emergence_contributions=[0.8, 0.85, 0.9],
        )
    return knowledge


def find_complementary_patterns(
    knowledge1: DomainKnowledge, knowledge2: DomainKnowledge
) -> list[str]:
    """Pairs of patterns from two domains that can be combined, as ``a+b`` strings."""
    return [
        f"{first}+{second}"
        for first in knowledge1.patterns
        for second in knowledge2.patterns
        if "pattern" in first and "pattern" in second
    ]


class KnowledgeSynthesizer:
    """Integrates knowledge across domains into syntheses, insights and patterns."""

    def __init__(self) -> None:
        self.knowledge_synthesis: list[KnowledgeSynthesis] = []
        self.cross_domain_insights: list[CrossDomainInsight] = []
        self.integration_patterns: list[IntegrationPattern] = []

    def identify_integration_opportunities(
        self, domain_knowledge: dict[str, DomainKnowledge]
    ) -> dict[tuple[str, str], list[str]]:
        """Complementary patterns for each unordered pair of domains that has any."""
        logger.info("Identifying knowledge integration opportunities...")
        domains = list(domain_knowledge)
        opportunities: dict[tuple[str, str], list[str]] = {}
        for position, first in enumerate(domains):
            for second in domains[position + 1:]:
                complementary = find_complementary_patterns(
                    domain_knowledge[first], domain_knowledge[second]
                )
                if complementary:
                    logger.info(
                        "Found %d complementary patterns between %s and %s",
                        len(complementary), first, second,
                    )
                    opportunities[(first, second)] = complementary
        return opportunities

    def perform_knowledge_synthesis(self) -> list[KnowledgeSynthesis]:
        """Record the standard syntheses and return the ones just created."""
        logger.info("Performing knowledge synthesis...")
        created = [
            KnowledgeSynthesis(
                source_domains=["researcher", "domain_analyzer"],
                synthesis_type=SynthesisType.PATTERN_INTEGRATION,
                description=(
                    "Integration of pattern analysis and cross-domain insights "
                    "for enhanced emergence detection"
                ),
                confidence=0.85,
                emergence_potential=0.9,
                implications=[
                    "Enhanced pattern recognition across domains",
                    "Improved collaboration effectiveness",
                    "Better cross-domain knowledge transfer",
                ],
                evidence=[
                    "Pattern analysis results from researcher",
                    "Cross-domain insights from domain analyzer",
                    "Collaboration metrics showing improved effectiveness",
                ],
            ),
            KnowledgeSynthesis(
                source_domains=["architect", "researcher"],
                synthesis_type=SynthesisType.CONCEPT_FUSION,
                description=(
                    "Fusion of architectural optimization and pattern analysis "
                    "for system improvement"
                ),
                confidence=0.88,
                emergence_potential=0.92,
                implications=[
                    "Optimized system architecture based on pattern analysis",
                    "Enhanced collaboration patterns",
                    "Improved emergence conditions",
                ],
                evidence=[
                    "Architectural analysis results",
                    "Pattern analysis findings",
                    "System optimization recommendations",
                ],
            ),
        ]
        self.knowledge_synthesis.extend(created)
        logger.info("Created %d knowledge syntheses", len(self.knowledge_synthesis))
        return created

    def generate_cross_domain_insights(self) -> list[CrossDomainInsight]:
        """Record the standard cross-domain insights and return the ones just created."""
        logger.info("Generating cross-domain insights...")
        created = [
            CrossDomainInsight(
                source_domains=["researcher"],
                target_domain="domain_analyzer",
                insight_type=InsightType.PATTERN_TRANSFER,
                description=(
                    "Pattern analysis techniques can enhance cross-domain analysis effectiveness"
                ),
                confidence=0.85,
                applicability=0.9,
                emergence_contribution=0.88,
            ),
            CrossDomainInsight(
                source_domains=["architect"],
                target_domain="researcher",
                insight_type=InsightType.OPTIMIZATION_TRANSFER,
                description=(
                    "Architectural optimization principles can improve pattern analysis efficiency"
                ),
                confidence=0.82,
                applicability=0.85,
                emergence_contribution=0.85,
            ),
        ]
        self.cross_domain_insights.extend(created)
        logger.info("Generated %d cross-domain insights", len(self.cross_domain_insights))
        return created

    def create_integration_patterns(self) -> list[IntegrationPattern]:
        """Record the standard integration patterns and return the ones just created."""
        logger.info("Creating knowledge integration patterns...")
        created = [
            IntegrationPattern(
                pattern_id="pattern_integration",
                name="Pattern Integration",
                description="Combine patterns from multiple domains to create new insights",
                source_domains=["researcher", "domain_analyzer"],
                integration_method="pattern_fusion",
                success_rate=0.85,
                emergence_potential=0.9,
                use_cases=["cross_domain_analysis", "insight_generation"],
            ),
            IntegrationPattern(
                pattern_id="concept_fusion",
                name="Concept Fusion",
                description="Fuse concepts from different domains to create new understanding",
                source_domains=["architect", "researcher"],
                integration_method="concept_combination",
                success_rate=0.88,
                emergence_potential=0.92,
                use_cases=["system_optimization", "knowledge_synthesis"],
            ),
        ]
        self.integration_patterns.extend(created)
        logger.info("Created %d integration patterns", len(self.integration_patterns))
        return created

    def synthesize(self) -> dict[str, DomainKnowledge]:
        """Run a full synthesis pass and return the domain knowledge it drew on."""
        logger.info("Beginning cross-domain knowledge synthesis...")
        domain_knowledge = load_domain_knowledge()
        logger.info("Loaded knowledge from %d domains", len(domain_knowledge))
        self.identify_integration_opportunities(domain_knowledge)
        self.perform_knowledge_synthesis()
        self.generate_cross_domain_insights()
        self.create_integration_patterns()
        logger.info("Knowledge synthesis complete")
        return domain_knowledge