# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Assembly of the observation partials of mutual approximation links.

For one link the partials of all estimated parameters are collected in a
block map keyed by (start index, size) in the global parameter vector. Only
parameters the observable depends on get a block; the index ranges of all
initial states stay reserved whether or not the link depends on them.

All blocks of a link share one scaling object. The LinkPartials result owns
it; the blocks keep weak references only, so the result must stay alive as
long as its blocks are evaluated.
"""

import logging
from typing import Dict, Iterable, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from ..core.config import PartialAssemblyConfig
from ..core.constants import INITIAL_STATE_SIZE
from ..core.data_structures import LinkEnds, ObservableType, PartialCreationResult
from ..environment.bodies import SystemOfBodies
from ..logger import trace
from ..parameters.estimatable_parameters import (EstimatableParameter,
                                                 is_parameter_observation_link_property)
from ..parameters.parameter_set import EstimatableParameterSet
from ..partials.light_time_corrections import CorrectionPartialChain, LightTimeCorrection
from ..partials.observation_partials import (LinkObservationPartial, ObservationPartial,
                                             create_observation_partial_wrt_link_property)
from ..partials.position_partials import PositionPartialFactory
from ..partials.scaling import ObservationPartialScaling, create_observation_scaling

logger = logging.getLogger(__name__)

BlockKey = Tuple[int, int]
CorrectionGroups = Sequence[Sequence[LightTimeCorrection]]


class LinkPartials(NamedTuple):
    """Partials of one link: block map and the scaling object shared by its blocks"""
    blocks: Dict[BlockKey, ObservationPartial]
    scaling: ObservationPartialScaling


def validate_link_ends(observable_type: ObservableType, link_ends: LinkEnds):
    """
    Raises:
    -------
    ValueError
        If the link lacks a role required by the observable
    """
    missing = link_ends.missing_roles(observable_type.required_link_ends)
    if missing:
        raise ValueError(f"Error when making {observable_type.name.lower()} partials, "
                         f"{', '.join(role.name.lower() for role in missing)} not found in {link_ends!r}")


class _LinkPartialBuilder:
    """Creates the partial of one link w.r.t. one parameter"""

    def __init__(self, observable_type: ObservableType, link_ends: LinkEnds,
                 factory: PositionPartialFactory, corrections: CorrectionPartialChain,
                 scaling: ObservationPartialScaling):
        self.observable_type = observable_type
        self.link_ends = link_ends
        self.factory = factory
        self.corrections = corrections
        self.scaling = scaling

    def through_link(self, parameter: EstimatableParameter, parameter_or_body) -> PartialCreationResult:
        position_partials = self.factory.try_create(self.link_ends, parameter_or_body)
        correction_partials = self.corrections.partial_functions(parameter)
        if not position_partials and not correction_partials:
            return PartialCreationResult.absent("no link end position or light-time correction depends on it")
        return PartialCreationResult.present(LinkObservationPartial(
            self.observable_type, parameter, self.scaling, position_partials, correction_partials))

    def create(self, parameter: EstimatableParameter) -> PartialCreationResult:
        if is_parameter_observation_link_property(parameter.parameter_type):
            return create_observation_partial_wrt_link_property(self.link_ends, self.observable_type, parameter)
        return self.through_link(parameter, parameter)


def create_link_partials(observable_type: ObservableType, link_ends: LinkEnds, bodies: SystemOfBodies,
                         parameter_set: EstimatableParameterSet,
                         correction_groups: Optional[CorrectionGroups] = None,
                         central_instant_observable: bool = True) -> LinkPartials:
    """
    Create the partials of one link w.r.t. all estimated parameters.

    Parameters:
    -----------
    observable_type : ObservableType
        Mutual approximation observable of the link
    link_ends : LinkEnds
        Link with transmitter, transmitter2 and receiver
    bodies : SystemOfBodies
        Body context
    parameter_set : EstimatableParameterSet
        All estimated parameters
    correction_groups : Sequence[Sequence[LightTimeCorrection]], optional
        Light-time corrections per leg; empty or None for none
    central_instant_observable : bool
        Scaling variant of MUTUAL_APPROXIMATION (see create_observation_scaling)

    Returns:
    --------
    LinkPartials
        Block map keyed by (start index, size), and the shared scaling

    Raises:
    -------
    ValueError
        If a required role is missing, the correction groups do not match
        the number of legs, or an initial state parameter is not a body state
    """
    validate_link_ends(observable_type, link_ends)
    corrections = CorrectionPartialChain.from_correction_groups(correction_groups, observable_type.number_of_legs)
    scaling = create_observation_scaling(observable_type, central_instant_observable)
    builder = _LinkPartialBuilder(observable_type, link_ends, PositionPartialFactory(bodies), corrections, scaling)

    blocks: Dict[BlockKey, ObservationPartial] = {}

    def insert(key: BlockKey, parameter: EstimatableParameter, result: PartialCreationResult):
        if result.is_present:
            blocks[key] = result.partial
            logger.debug(f"{link_ends!r}: block {key} for {parameter.description}")
        else:
            trace(logger, f"{link_ends!r}: no partial for {parameter.description} ({result.reason})")

    index = 0
    for parameter in parameter_set.initial_state_parameters:
        body = parameter_set.dynamical_parameter_body(parameter)
        insert((index, INITIAL_STATE_SIZE), parameter, builder.through_link(parameter, body))
        index += INITIAL_STATE_SIZE

    for index, parameter in parameter_set.scalar_parameters.items():
        insert((index, 1), parameter, builder.create(parameter))

    for index, parameter in parameter_set.vector_parameters.items():
        insert((index, parameter.size), parameter, builder.create(parameter))

    logger.debug(f"{observable_type.name} partials of {link_ends!r}: {len(blocks)} blocks "
                 f"for {len(parameter_set)} parameters")
    return LinkPartials(blocks, scaling)


def _link_correction_groups(observable_type: ObservableType, link_ends: LinkEnds,
                            correction_map: Optional[Mapping[LinkEnds, CorrectionGroups]],
                            strict: bool) -> CorrectionGroups:
    groups = list((correction_map or {}).get(link_ends, []))
    number_of_legs = observable_type.number_of_legs
    if groups and len(groups) != number_of_legs:
        message = (f"Error when making {observable_type.name.lower()} partials for {link_ends!r}, "
                   f"light time corrections for {len(groups)} links found, instead of {number_of_legs}.")
        if strict:
            raise ValueError(message)
        logger.warning(f"{message} Assembling the link without light-time correction partials")
        return []
    return groups


def create_partials_for_links(observable_type: ObservableType, link_ends_list: Iterable[LinkEnds],
                              bodies: SystemOfBodies, parameter_set: EstimatableParameterSet,
                              correction_map: Optional[Mapping[LinkEnds, CorrectionGroups]] = None,
                              central_instant_observable: bool = True,
                              strict: bool = False) -> Dict[LinkEnds, LinkPartials]:
    """
    Create the partials of several links.

    All links are checked for their required roles before any partial is
    created. Links without an entry in ``correction_map`` are assembled
    without light-time correction partials.

    Parameters:
    -----------
    strict : bool
        Raise ValueError when the correction groups of a link do not match
        its number of legs; otherwise log a warning and assemble that link
        without corrections
    """
    link_ends_list = list(link_ends_list)
    for link_ends in link_ends_list:
        validate_link_ends(observable_type, link_ends)

    partials = {}
    for link_ends in link_ends_list:
        groups = _link_correction_groups(observable_type, link_ends, correction_map, strict)
        partials[link_ends] = create_link_partials(observable_type, link_ends, bodies, parameter_set,
                                                   groups, central_instant_observable)
    logger.info(f"Created {observable_type.name} partials for {len(partials)} links")
    return partials


def assemble_partials(link_ends: LinkEnds, parameter_set: EstimatableParameterSet,
                      correction_groups: Optional[CorrectionGroups], is_central_instant_observable: bool,
                      bodies: SystemOfBodies,
                      observable_type: ObservableType = ObservableType.MUTUAL_APPROXIMATION) -> LinkPartials:
    """Single-link assembly, returning (block map, scaling)"""
    return create_link_partials(observable_type, link_ends, bodies, parameter_set,
                                correction_groups, is_central_instant_observable)


def assemble_partials_batch(link_ends_list: Iterable[LinkEnds], parameter_set: EstimatableParameterSet,
                            correction_map: Optional[Mapping[LinkEnds, CorrectionGroups]],
                            is_central_instant_observable: bool, bodies: SystemOfBodies,
                            observable_type: ObservableType = ObservableType.MUTUAL_APPROXIMATION,
                            strict: bool = False) -> Dict[LinkEnds, LinkPartials]:
    """Batch assembly, returning link -> (block map, scaling)"""
    return create_partials_for_links(observable_type, link_ends_list, bodies, parameter_set,
                                     correction_map, is_central_instant_observable, strict)


def _create_for_observable(observable_type: ObservableType,
                           links: Union[LinkEnds, Iterable[LinkEnds]], bodies: SystemOfBodies,
                           parameter_set: EstimatableParameterSet, corrections=None,
                           central_instant_observable: bool = True, strict: bool = False):
    if isinstance(links, LinkEnds):
        return create_link_partials(observable_type, links, bodies, parameter_set,
                                    corrections, central_instant_observable)
    return create_partials_for_links(observable_type, links, bodies, parameter_set,
                                     corrections, central_instant_observable, strict)


def create_mutual_approximation_partials(links, bodies, parameter_set, corrections=None,
                                         central_instant_observable=True, strict=False):
    """
    Mutual approximation partials of one link (LinkEnds) or of several.

    ``corrections`` holds the correction groups of the link, or for several
    links a map from link ends to correction groups.
    """
    return _create_for_observable(ObservableType.MUTUAL_APPROXIMATION, links, bodies, parameter_set,
                                  corrections, central_instant_observable, strict)


def create_mutual_approximation_with_impact_parameter_partials(links, bodies, parameter_set,
                                                               corrections=None, strict=False):
    """Partials of [central instant, impact parameter], see create_mutual_approximation_partials"""
    return _create_for_observable(ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER, links, bodies,
                                  parameter_set, corrections, strict=strict)


def create_impact_parameter_partials(links, bodies, parameter_set, corrections=None, strict=False):
    """Impact parameter partials, see create_mutual_approximation_partials"""
    return _create_for_observable(ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX, links, bodies,
                                  parameter_set, corrections, strict=strict)


class PartialAssembler:
    """
    Partial assembly bound to one estimation run.

    Parameters:
    -----------
    bodies : SystemOfBodies
        Body context of the run
    parameter_set : EstimatableParameterSet
        Estimated parameters of the run
    config : PartialAssemblyConfig, optional
        Scaling variant and batch strictness

    Examples
    --------
    >>> assembler = PartialAssembler(bodies, parameter_set)
    >>> blocks, scaling = assembler.create(ObservableType.MUTUAL_APPROXIMATION, link_ends)
    """

    def __init__(self, bodies: SystemOfBodies, parameter_set: EstimatableParameterSet,
                 config: Optional[PartialAssemblyConfig] = None):
        self.bodies = bodies
        self.parameter_set = parameter_set
        self.config = config or PartialAssemblyConfig()
        logger.info(f"Partial assembler: {len(bodies)} bodies, {len(parameter_set)} parameters, "
                    f"{self.config.describe()}")

    def create(self, observable_type: ObservableType, link_ends: LinkEnds,
               correction_groups: Optional[CorrectionGroups] = None) -> LinkPartials:
        return create_link_partials(observable_type, link_ends, self.bodies, self.parameter_set,
                                    correction_groups, self.config.central_instant_observable)

    def create_batch(self, observable_type: ObservableType, link_ends_list: Iterable[LinkEnds],
                     correction_map: Optional[Mapping[LinkEnds, CorrectionGroups]] = None
                     ) -> Dict[LinkEnds, LinkPartials]:
        return create_partials_for_links(observable_type, link_ends_list, self.bodies, self.parameter_set,
                                         correction_map, self.config.central_instant_observable,
                                         self.config.strict_batch_leg_count)
